from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from bfcrypt.errors import FormatError

if TYPE_CHECKING:
    from collections.abc import Iterator

#: charmap used by BCrypt
BCRYPT_CHARS = "./ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"

#: marks bytes outside the charmap in a decode table
INVALID = -1


def _encode_bytes_big(
    next_value: Callable[[], int], chunks: int, tail: int
) -> Iterator[int]:
    """helper used by encode_bytes() to handle big-endian encoding"""
    #
    # output bit layout:
    #
    # first byte:   v1 765432
    #
    # second byte:  v1 10....
    #              +v2 ..7654
    #
    # third byte:   v2 3210..
    #              +v3 ....76
    #
    # fourth byte:  v3 543210
    #
    idx = 0
    while idx < chunks:
        v1 = next_value()
        v2 = next_value()
        v3 = next_value()
        yield v1 >> 2
        yield ((v1 & 0x03) << 4) | (v2 >> 4)
        yield ((v2 & 0x0F) << 2) | (v3 >> 6)
        yield v3 & 0x3F
        idx += 1
    if tail:
        v1 = next_value()
        if tail == 1:
            # note: 4 lsb of last byte are padding
            yield v1 >> 2
            yield (v1 & 0x03) << 4
        else:
            assert tail == 2
            # note: 2 lsb of last byte are padding
            v2 = next_value()
            yield v1 >> 2
            yield ((v1 & 0x03) << 4) | (v2 >> 4)
            yield ((v2 & 0x0F) << 2)


class Base64Engine:
    """big-endian base64 codec over a custom charmap, without padding chars.

    Decoding is lenient by default: it stops at the first character outside
    the charmap, or once ``max_bytes`` have been produced, and returns what
    it has so far. Callers that need an exact length must check it, or pass
    ``strict=True``.
    """

    def __init__(self, charmap: str) -> None:
        if len(charmap) != 64:
            raise ValueError("charmap must be 64 chars")

        self._charmap = charmap.encode("latin-1")
        decode_table = [INVALID] * 128
        for idx, char in enumerate(self._charmap):
            decode_table[char] = idx
        self._decode_table = tuple(decode_table)

    @property
    def charmap(self) -> str:
        return self._charmap.decode("latin-1")

    def _encode64(self, i: int) -> int:
        return self._charmap[i]

    def _decode64(self, char: int) -> int:
        if char >= len(self._decode_table):
            return INVALID
        return self._decode_table[char]

    def encode_bytes(self, source: bytes) -> bytes:
        """encode bytes to base64 string.

        :arg source: byte string to encode.
        :returns: byte string containing encoded data.
        """
        chunks, tail = divmod(len(source), 3)
        next_value = iter(source).__next__
        gen = _encode_bytes_big(next_value, chunks, tail)
        return bytes(map(self._encode64, gen))

    def decode_bytes(
        self, source: bytes, max_bytes: int, *, strict: bool = False
    ) -> bytes:
        """decode up to ``max_bytes`` bytes from base64 string.

        :arg source: byte string to decode.
        :arg max_bytes: maximum number of bytes to produce.
        :arg strict:
            raise :exc:`FormatError` unless source is exactly the encoding of
            ``max_bytes`` bytes: no invalid characters, nothing missing or left
            over, and zeroed padding bits.
        :returns: decoded bytes, possibly fewer than ``max_bytes``.
        """
        if max_bytes <= 0:
            raise ValueError("max_bytes must be positive")

        decode64 = self._decode64
        size = len(source)
        out = bytearray()
        pos = 0
        invalid = False
        while pos < size - 1 and len(out) < max_bytes:
            c1 = decode64(source[pos])
            c2 = decode64(source[pos + 1])
            pos += 2
            if c1 == INVALID or c2 == INVALID:
                invalid = True
                break
            out.append(((c1 << 2) | (c2 >> 4)) & 0xFF)
            if len(out) >= max_bytes or pos >= size:
                break

            c3 = decode64(source[pos])
            pos += 1
            if c3 == INVALID:
                invalid = True
                break
            out.append(((c2 << 4) | (c3 >> 2)) & 0xFF)
            if len(out) >= max_bytes or pos >= size:
                break

            c4 = decode64(source[pos])
            pos += 1
            if c4 == INVALID:
                invalid = True
                break
            out.append(((c3 << 6) | c4) & 0xFF)

        if strict:
            self._check_strict(source, out, pos, invalid, max_bytes)
        return bytes(out)

    def _check_strict(
        self, source: bytes, out: bytearray, pos: int, invalid: bool, max_bytes: int
    ) -> None:
        if invalid:
            raise FormatError("invalid character in base64 data")
        if len(out) < max_bytes:
            raise FormatError(
                f"base64 data too short: decoded {len(out)} of {max_bytes} bytes"
            )
        if pos < len(source):
            raise FormatError("unexpected trailing base64 data")

        # a partial group leaves 4 or 2 unused low bits in its last char
        tail = len(out) % 3
        last = self._decode64(source[-1])
        if (tail == 1 and last & 0x0F) or (tail == 2 and last & 0x03):
            raise FormatError("base64 data has non-zero padding bits")


bcrypt64 = Base64Engine(BCRYPT_CHARS)
