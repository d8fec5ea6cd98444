__all__ = [
    "ArgumentError",
    "BcryptError",
    "FormatError",
    "MalformedHashError",
    "RangeError",
]


class BcryptError(Exception):
    """base class for all errors raised by bfcrypt"""


class FormatError(BcryptError, ValueError):
    """hash or salt string could not be parsed"""


class RangeError(BcryptError, ValueError):
    """cost (log2 rounds) outside the supported range"""


class ArgumentError(BcryptError, ValueError):
    """missing or empty argument"""


MalformedHashError = FormatError
