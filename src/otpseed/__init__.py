from re import IGNORECASE, split
from typing import Any, Dict, Optional
from urllib.parse import parse_qsl, unquote, urlparse

from .exceptions import InvalidSecretError as InvalidSecretError
from .exceptions import KeyDerivationError as KeyDerivationError
from .exceptions import OTPError as OTPError
from .exceptions import RandomSourceError as RandomSourceError
from .hotp import HOTP as HOTP
from .otp import OTP as OTP
from .seed import derive_secret as derive_secret
from .token import generate_token as generate_token
from .totp import TOTP as TOTP
from .totp import TOTPCodes as TOTPCodes
from .utils import build_uri

__version__ = "0.1.0"


def provisioning_uri(email: str, issuer: str, secret: str, period: Optional[int] = None) -> str:
    """
    ``otpauth://totp/<issuer>:<email>?secret=<secret>&issuer=<issuer>``
    """
    return build_uri(secret, name=email, issuer=issuer, period=period)


def parse_uri(uri: str) -> TOTP:
    """
    Parses a TOTP provisioning URI.

    See also:
        https://github.com/google/google-authenticator/wiki/Key-Uri-Format

    :param uri: the totp URI to parse
    :returns: TOTP object
    :raises ValueError: the URI is not a SHA1, 6 digit otpauth TOTP URI
    :raises InvalidSecretError: the secret is not valid base32
    """
    secret = None
    otp_data: Dict[str, Any] = {}

    parsed_uri = urlparse(uri)

    if parsed_uri.scheme != "otpauth":
        raise ValueError("Not an otpauth URI")
    if parsed_uri.netloc != "totp":
        raise ValueError("Not a supported OTP type")

    # values are escaped, so a literal colon is the separator; older
    # encoders write the separator itself as %3A
    label = parsed_uri.path[1:]
    if ":" in label:
        accountinfo_parts = [unquote(part) for part in label.split(":", 1)]
    else:
        accountinfo_parts = [unquote(part) for part in split("%3A", label, maxsplit=1, flags=IGNORECASE)]
    if len(accountinfo_parts) == 1:
        otp_data["name"] = accountinfo_parts[0]
    else:
        otp_data["issuer"] = accountinfo_parts[0]
        otp_data["name"] = accountinfo_parts[1]

    for key, value in parse_qsl(parsed_uri.query):
        if key == "secret":
            secret = value
        elif key == "issuer":
            if otp_data.get("issuer") is not None and otp_data["issuer"] != value:
                raise ValueError("If issuer is specified in both label and parameters, it should be equal.")
            otp_data["issuer"] = value
        elif key == "algorithm":
            if value.upper() != "SHA1":
                raise ValueError("Invalid value for algorithm, must be SHA1")
        elif key == "digits":
            if int(value) != 6:
                raise ValueError("Digits may only be 6")
        elif key == "period":
            otp_data["interval"] = int(value)

    if not secret:
        raise ValueError("No secret found in URI")

    otp = TOTP(secret, **otp_data)
    otp.byte_secret()
    return otp
