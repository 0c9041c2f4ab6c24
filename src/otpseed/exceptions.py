class OTPError(Exception):
    """
    Base class for errors raised by otpseed.
    """


class RandomSourceError(OTPError):
    """
    The secure random source is unavailable, or it never produced a token
    satisfying the character-class policy.
    """


class InvalidSecretError(OTPError, ValueError):
    """
    The secret is not valid unpadded Base32 text.
    """


class KeyDerivationError(OTPError):
    """
    A secret could not be derived.
    """
