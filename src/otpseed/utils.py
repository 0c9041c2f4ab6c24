import unicodedata
from hmac import compare_digest
from typing import List, Optional, Tuple
from urllib.parse import quote

from .otp import byte_secret

DEFAULT_PERIOD = 30

# characters kept literal in labels and parameter values
_SAFE = "@"


def build_uri(
    secret: str,
    name: str,
    issuer: Optional[str] = None,
    period: Optional[int] = None,
) -> str:
    """
    Returns the provisioning URI for a TOTP secret, e.g.
    ``otpauth://totp/Sprockets:jdoe@xxx.com?secret=JBSWY3DPEHPK3PXP&issuer=Sprockets``.

    This can then be encoded in a QR Code and used to provision an
    authenticator app.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param secret: the unpadded base32 secret
    :param name: name of the account, usually an e-mail address
    :param issuer: the name of the OTP issuer; this will be the
        organization title of the OTP entry in Authenticator
    :param period: the number of seconds a code stays valid; only
        written when it differs from 30
    :returns: provisioning uri
    """
    byte_secret(secret)
    secret = secret.strip().replace(" ", "").upper()

    label = quote(name, safe=_SAFE)
    url_args: List[Tuple[str, str]] = [("secret", secret)]
    if issuer is not None:
        label = quote(issuer, safe=_SAFE) + ":" + label
        url_args.append(("issuer", issuer))
    if period and period != DEFAULT_PERIOD:
        url_args.append(("period", str(period)))

    query = "&".join("{}={}".format(k, quote(v, safe=_SAFE)) for k, v in url_args)
    return "otpauth://totp/{0}?{1}".format(label, query)


def strings_equal(s1: str, s2: str) -> bool:
    """
    Timing-attack resistant string comparison.

    Normal comparison using == will short-circuit on the first mismatching
    character. This avoids that by scanning the whole string, though we
    still reveal to a timing attack whether the strings are the same
    length.
    """
    s1 = unicodedata.normalize("NFKC", s1)
    s2 = unicodedata.normalize("NFKC", s2)
    return compare_digest(s1.encode("utf-8"), s2.encode("utf-8"))
