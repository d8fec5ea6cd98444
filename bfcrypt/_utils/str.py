import hmac
from typing import AnyStr


def repeat_string(source: AnyStr, size: int) -> AnyStr:
    """
    repeat or truncate <source> string, so it has length <size>
    """
    mult = (size - 1) // len(source) + 1
    return (source * mult)[:size]


def consteq(left: AnyStr, right: AnyStr) -> bool:
    """compare two strings in time independent of where they differ"""
    if type(left) is not type(right):
        raise TypeError

    left_bytes = left.encode() if isinstance(left, str) else left
    right_bytes = right.encode() if isinstance(right, str) else right
    return hmac.compare_digest(left_bytes, right_bytes)
