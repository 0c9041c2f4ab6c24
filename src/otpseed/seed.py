import base64
import logging
import secrets

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.kdf.argon2 import Argon2id

from .exceptions import KeyDerivationError, OTPError
from .token import generate_token

logger = logging.getLogger(__name__)

SUPPORTED_SIZES = (16, 26, 32)
DEFAULT_SIZE = 32

SALT_SIZE = 16
TOKEN_SIZE = 32
KEY_SIZE = 32

# Argon2id cost
ARGON2_ITERATIONS = 1
ARGON2_LANES = 4
ARGON2_MEMORY_KIB = 64 * 1024


def secret_size(size: int) -> int:
    if size in SUPPORTED_SIZES:
        return size
    return DEFAULT_SIZE


def derive_key(token: str, salt: bytes) -> bytes:
    """
    Runs ``token`` through Argon2id and returns ``KEY_SIZE`` bytes.
    """
    kdf = Argon2id(
        salt=salt,
        length=KEY_SIZE,
        iterations=ARGON2_ITERATIONS,
        lanes=ARGON2_LANES,
        memory_cost=ARGON2_MEMORY_KIB,
    )
    return kdf.derive(token.encode("ascii"))


def encode_secret(key: bytes) -> str:
    # the otpauth scheme does not use base32 padding
    return base64.b32encode(key).decode("ascii").rstrip("=")


def derive_secret(size: int = DEFAULT_SIZE) -> str:
    """
    Creates a new shared secret for TOTP enrollment.

    A fresh random token and salt are stretched with Argon2id and the
    derived key is Base32 encoded. The first ``size`` characters are the
    secret.

    :param size: 16, 26 or 32; any other value is treated as 32
    :returns: unpadded upper-case Base32 secret of exactly ``size`` characters
    :raises KeyDerivationError: the token, salt or key could not be produced
    """
    size = secret_size(size)
    try:
        salt = secrets.token_bytes(SALT_SIZE)
        token = generate_token(TOKEN_SIZE)
        key = derive_key(token, salt)
    except OTPError as e:
        raise KeyDerivationError("issue creating token: {}".format(e)) from e
    except (OSError, NotImplementedError, UnsupportedAlgorithm, ValueError) as e:
        raise KeyDerivationError("issue deriving key: {}".format(e)) from e

    encoded = encode_secret(key)
    if len(encoded) < max(SUPPORTED_SIZES):
        raise KeyDerivationError("derived key too short: {} characters".format(len(encoded)))

    logger.debug("derived %d character secret", size)
    return encoded[:size]
