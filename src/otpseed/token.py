import logging
import secrets
from typing import Optional

from .exceptions import RandomSourceError

logger = logging.getLogger(__name__)

TOKEN_CHARS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
DEFAULT_TOKEN_LENGTH = 26
MIN_TOKEN_LENGTH = 17
MAX_TOKEN_LENGTH = 32
MAX_TOKEN_ATTEMPTS = 1000


def token_length(length: Optional[int]) -> int:
    """
    Lengths in (16, 32] are kept; anything else resolves to 26.
    """
    if length is not None and MIN_TOKEN_LENGTH <= length <= MAX_TOKEN_LENGTH:
        return length
    return DEFAULT_TOKEN_LENGTH


def has_required_classes(s: str) -> bool:
    """
    True when ``s`` holds at least one ASCII uppercase letter and one digit.
    """
    has_upper = any("A" <= c <= "Z" for c in s)
    has_digit = any("0" <= c <= "9" for c in s)
    return has_upper and has_digit


def _draw(length: int) -> str:
    try:
        return "".join(TOKEN_CHARS[secrets.randbelow(len(TOKEN_CHARS))] for _ in range(length))
    except (OSError, NotImplementedError) as e:
        raise RandomSourceError("secure random source unavailable: {}".format(e)) from e


def generate_token(length: Optional[int] = None) -> str:
    """
    Generates a random token over ``A-Z0-9`` that contains at least one
    uppercase letter and one digit.

    The whole string is redrawn until it satisfies that policy, at most
    ``MAX_TOKEN_ATTEMPTS`` times.

    :param length: requested length, see :func:`token_length`
    :returns: token text
    :raises RandomSourceError: the random source failed or the attempt
        limit was reached
    """
    length = token_length(length)
    for attempt in range(1, MAX_TOKEN_ATTEMPTS + 1):
        token = _draw(length)
        if has_required_classes(token):
            if attempt > 1:
                logger.debug("token accepted after %d attempts", attempt)
            return token

    logger.error("no acceptable token after %d attempts", MAX_TOKEN_ATTEMPTS)
    raise RandomSourceError("no acceptable token after {} attempts".format(MAX_TOKEN_ATTEMPTS))
