"""Tests for the TOTP wrapper."""

from __future__ import annotations

import datetime

import pytest

from otpseed import TOTP, TOTPCodes
from otpseed.otp import hotp
from otpseed.totp import interval_or_default, totp, unix_seconds

RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"

# RFC 6238 appendix B SHA1 vectors, last six digits
RFC6238_CODES = [
    (59, "287082"),
    (1111111109, "081804"),
    (1111111111, "050471"),
    (1234567890, "005924"),
    (2000000000, "279037"),
    (20000000000, "353130"),
]


@pytest.mark.parametrize("timestamp,expected", RFC6238_CODES)
def test_rfc6238_vectors(timestamp, expected):
    assert TOTP(RFC_SECRET).at(timestamp) == expected
    assert totp(RFC_SECRET, 30, timestamp).current == expected


def test_codes_around_boundary():
    codes = totp(RFC_SECRET, 30, 59)
    assert codes == TOTPCodes(prev="755224", current="287082", next="359152", expires_in=1)


@pytest.mark.parametrize("timestamp", [30, 59, 60, 1111111109, 1234567890, 1700000015])
def test_codes_match_adjacent_counters(timestamp):
    codes = totp(RFC_SECRET, 30, timestamp)
    counter = timestamp // 30
    assert codes.current == hotp(RFC_SECRET, counter)
    assert codes.prev == hotp(RFC_SECRET, counter - 1)
    assert codes.next == hotp(RFC_SECRET, counter + 1)


def test_codes_with_sixty_second_step():
    codes = totp(RFC_SECRET, 60, 1234567890)
    counter = 1234567890 // 60
    assert codes.prev == hotp(RFC_SECRET, counter - 1)
    assert codes.current == hotp(RFC_SECRET, counter)
    assert codes.next == hotp(RFC_SECRET, counter + 1)
    assert codes.expires_in == 60 - 1234567890 % 60


@pytest.mark.parametrize(
    "step,timestamp,expected",
    [
        (30, 59, 1),
        (30, 60, 30),
        (30, 61, 29),
        (30, 89, 1),
        (60, 120, 60),
        (60, 150, 30),
        (45, 100, 35),
        (7, 1000, 1),
    ],
)
def test_expires_in(step, timestamp, expected):
    assert totp(RFC_SECRET, step, timestamp).expires_in == expected


@pytest.mark.parametrize("step", [1, 7, 30, 45, 60, 90])
def test_expires_in_never_zero(step):
    otp = TOTP(RFC_SECRET, interval=step)
    for t in range(1000, 1000 + 2 * step + 1):
        assert 0 < otp.expires_in(t) <= step


@pytest.mark.parametrize("step", [0, None])
def test_default_step(step):
    assert interval_or_default(step) == 30
    assert totp(RFC_SECRET, step, 59) == totp(RFC_SECRET, 30, 59)


def test_negative_step():
    with pytest.raises(ValueError):
        TOTP(RFC_SECRET, interval=-30)


def test_first_window_has_no_previous_code():
    with pytest.raises(ValueError):
        totp(RFC_SECRET, 30, 10)


def test_float_timestamps_are_floored():
    assert totp(RFC_SECRET, 30, 59.99) == totp(RFC_SECRET, 30, 59)


def test_aware_datetime():
    when = datetime.datetime(2009, 2, 13, 23, 31, 30, tzinfo=datetime.timezone.utc)
    assert unix_seconds(when) == 1234567890
    assert totp(RFC_SECRET, 30, when).current == "005924"


def test_naive_datetime_is_local_time():
    when = datetime.datetime.fromtimestamp(1111111109)
    assert TOTP(RFC_SECRET).at(when) == "081804"


def test_default_time_is_now(monkeypatch):
    monkeypatch.setattr("time.time", lambda: 1111111111.5)
    assert TOTP(RFC_SECRET).now() == "050471"
    assert totp(RFC_SECRET).current == "050471"


def test_at_counter_offset():
    otp = TOTP(RFC_SECRET)
    assert otp.at(59, -1) == "755224"
    assert otp.at(59, 1) == "359152"


def test_timecode():
    assert TOTP(RFC_SECRET).timecode(59) == 1
    assert TOTP(RFC_SECRET, interval=60).timecode(1234567890) == 20576131


def test_verify():
    otp = TOTP(RFC_SECRET)
    assert otp.verify("287082", for_time=59)
    assert not otp.verify("359152", for_time=59)
    assert not otp.verify("123456", for_time=59)


def test_verify_window():
    otp = TOTP(RFC_SECRET)
    assert otp.verify("359152", for_time=59, valid_window=1)
    assert otp.verify("755224", for_time=59, valid_window=1)
    assert not otp.verify("969429", for_time=59, valid_window=1)


def test_verify_window_at_epoch():
    # counter 0 has no predecessor
    assert TOTP(RFC_SECRET).verify("755224", for_time=0, valid_window=1)


def test_verify_normalizes_unicode_digits():
    assert TOTP(RFC_SECRET).verify("２８７０８２", for_time=59)


def test_provisioning_uri():
    otp = TOTP(RFC_SECRET, name="jdoe@xxx.com", issuer="Sprockets")
    assert otp.provisioning_uri() == (
        "otpauth://totp/Sprockets:jdoe@xxx.com?secret=GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ&issuer=Sprockets"
    )
    assert otp.provisioning_uri(name="alice@example.com", issuer_name="Acme") == (
        "otpauth://totp/Acme:alice@example.com?secret=GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ&issuer=Acme"
    )


def test_provisioning_uri_with_period():
    otp = TOTP(RFC_SECRET, name="jdoe@xxx.com", issuer="Sprockets", interval=60)
    assert otp.provisioning_uri().endswith("&issuer=Sprockets&period=60")


@pytest.mark.parametrize("step", [0.5, 0.999, -0.5])
def test_fractional_step_below_one_second(step):
    with pytest.raises(ValueError):
        totp(RFC_SECRET, step, 1000)
