import base64
import binascii
import hashlib
import hmac
import struct
from typing import Optional

from .exceptions import InvalidSecretError

DIGITS = 6
MAX_COUNTER = 2**64 - 1


def byte_secret(secret: str) -> bytes:
    """
    Decodes an unpadded Base32 secret into raw key bytes.

    Surrounding whitespace and embedded spaces are dropped and the text is
    upper-cased before decoding.

    :raises InvalidSecretError: the text is not valid Base32
    """
    if not isinstance(secret, str):
        raise InvalidSecretError("secret must be a string, not {}".format(type(secret).__name__))
    normalized = secret.strip().replace(" ", "")
    if not normalized.isascii():
        raise InvalidSecretError("secret must be ASCII base32 text")
    normalized = normalized.upper()
    if not normalized:
        raise InvalidSecretError("secret is empty")
    if "=" in normalized:
        raise InvalidSecretError("secret must not contain padding")
    missing_padding = len(normalized) % 8
    if missing_padding != 0:
        normalized += "=" * (8 - missing_padding)
    try:
        return base64.b32decode(normalized)
    except (binascii.Error, ValueError) as e:
        raise InvalidSecretError("secret is not valid base32: {}".format(e)) from e


def int_to_bytestring(i: int) -> bytes:
    """
    Turns a counter into the 8-byte big-endian string fed to the HMAC.
    """
    if i < 0 or i > MAX_COUNTER:
        raise ValueError("counter must be between 0 and 2**64 - 1")
    return struct.pack(">Q", i)


def truncate(hmac_hash: bytes) -> int:
    # RFC 4226 dynamic truncation
    offset = hmac_hash[-1] & 0xF
    return struct.unpack(">I", hmac_hash[offset : offset + 4])[0] & 0x7FFFFFFF


def hotp(secret: str, counter: int) -> str:
    """
    Computes the RFC 4226 HOTP code of ``secret`` at ``counter``.

    :param secret: unpadded Base32 secret
    :param counter: HMAC counter, 0 <= counter < 2**64
    :returns: 6-digit zero-padded code
    """
    hasher = hmac.new(byte_secret(secret), int_to_bytestring(counter), hashlib.sha1)
    code = truncate(hasher.digest()) % 10**DIGITS
    # leading zeros survive the slice
    return str(10_000_000_000 + code)[-DIGITS:]


class OTP(object):
    """
    Base class for OTP handlers.
    """

    def __init__(self, s: str, name: Optional[str] = None, issuer: Optional[str] = None) -> None:
        self.secret = s
        self.name = name or "Secret"
        self.issuer = issuer

    def generate_otp(self, input: int) -> str:
        """
        :param input: the HMAC counter value to use as the OTP input.
            Usually either the counter, or the computed integer based on the Unix timestamp
        """
        return hotp(self.secret, input)

    def byte_secret(self) -> bytes:
        return byte_secret(self.secret)
