import calendar
import datetime
import math
import time
from typing import NamedTuple, Optional, Union

from . import utils
from .otp import OTP

DEFAULT_INTERVAL = 30

TimeInput = Union[datetime.datetime, int, float]


class TOTPCodes(NamedTuple):
    prev: str
    current: str
    next: str
    expires_in: int


def interval_or_default(interval: Optional[int]) -> int:
    if not interval:
        return DEFAULT_INTERVAL
    interval = int(interval)
    if interval < 1:
        raise ValueError("interval must be a positive number of seconds")
    return interval


def unix_seconds(for_time: Optional[TimeInput] = None) -> int:
    """
    Whole seconds since the epoch for ``for_time``.

    Naive datetimes are read as local time; aware ones are converted through
    UTC. ``None`` means the system clock.
    """
    if for_time is None:
        for_time = time.time()
    if isinstance(for_time, datetime.datetime):
        if for_time.tzinfo:
            return calendar.timegm(for_time.utctimetuple())
        return int(time.mktime(for_time.timetuple()))
    return int(math.floor(for_time))


class TOTP(OTP):
    """
    Handler for time-based OTP counters.
    """

    def __init__(
        self,
        s: str,
        name: Optional[str] = None,
        issuer: Optional[str] = None,
        interval: Optional[int] = DEFAULT_INTERVAL,
    ) -> None:
        """
        :param s: secret in base32 format
        :param name: account name
        :param issuer: issuer
        :param interval: the time interval in seconds for OTP. This defaults to 30;
            0 or None also mean 30.
        """
        self.interval = interval_or_default(interval)
        super().__init__(s=s, name=name, issuer=issuer)

    def at(self, for_time: TimeInput, counter_offset: int = 0) -> str:
        """
        Accepts either a Unix timestamp integer or a datetime object.

        :param for_time: the time to generate an OTP for
        :param counter_offset: the amount of ticks to add to the time counter
        :returns: OTP value
        """
        return self.generate_otp(self.timecode(for_time) + int(counter_offset))

    def now(self) -> str:
        """
        Generate the current time OTP

        :returns: OTP value
        """
        return self.at(time.time())

    def codes(self, for_time: Optional[TimeInput] = None) -> TOTPCodes:
        """
        The codes of the previous, current and next time steps, plus the
        seconds left in the current step.
        """
        now = unix_seconds(for_time)
        return TOTPCodes(
            prev=self.generate_otp((now - self.interval) // self.interval),
            current=self.generate_otp(now // self.interval),
            next=self.generate_otp((now + self.interval) // self.interval),
            expires_in=self.expires_in(now),
        )

    def expires_in(self, for_time: Optional[TimeInput] = None) -> int:
        """
        Seconds until the current step rolls over, in (0, interval].
        """
        return self.interval - unix_seconds(for_time) % self.interval

    def verify(self, otp: str, for_time: Optional[TimeInput] = None, valid_window: int = 0) -> bool:
        """
        Verifies the OTP passed in against the current time OTP.

        :param otp: the OTP to check against
        :param for_time: Time to check OTP at (defaults to now)
        :param valid_window: extends the validity to this many counter ticks before and after the current one
        :returns: True if verification succeeded, False otherwise
        """
        counter = self.timecode(for_time)
        matched = False
        for i in range(-valid_window, valid_window + 1):
            if counter + i < 0:
                continue
            # no early exit
            if utils.strings_equal(str(otp), self.generate_otp(counter + i)):
                matched = True
        return matched

    def provisioning_uri(self, name: Optional[str] = None, issuer_name: Optional[str] = None) -> str:
        """
        Returns the provisioning URI for the OTP.  This can then be
        encoded in a QR Code and used to provision an OTP app like
        Google Authenticator.

        :param name: name of the user account
        :param issuer_name: the name of the OTP issuer; this will be the
            organization title of the OTP entry in Authenticator
        :returns: provisioning URI
        """
        return utils.build_uri(
            self.secret,
            name=name if name else self.name,
            issuer=issuer_name if issuer_name else self.issuer,
            period=self.interval,
        )

    def timecode(self, for_time: Optional[TimeInput] = None) -> int:
        """
        Accepts either a timezone naive (`for_time.tzinfo is None`) or
        a timezone aware datetime as argument and returns the
        corresponding counter value (timecode).
        """
        return unix_seconds(for_time) // self.interval


def totp(secret: str, step: Optional[int] = DEFAULT_INTERVAL, now: Optional[TimeInput] = None) -> TOTPCodes:
    """
    Previous, current and next codes of ``secret`` around ``now`` along with
    the seconds until the current code expires.

    :param secret: unpadded base32 secret
    :param step: seconds per step; 0 or None mean 30
    :param now: timestamp or datetime, defaults to the system clock
    """
    return TOTP(secret, interval=step).codes(now)
