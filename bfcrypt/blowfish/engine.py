"""pure-python blowfish cipher, restricted to what bcrypt needs.

Only encryption of single 64-bit blocks is provided, along with the two
key schedules used by bcrypt: the standard blowfish one (:meth:`expand_key`)
and the salted "expensive key schedule" (:meth:`expand_eks_key`) from
Provos & Mazieres, "A Future-Adaptable Password Scheme".

Blocks are passed around as pairs of 32-bit ints rather than bytes, since
that is what the key schedules and the bcrypt driver operate on.
"""

from __future__ import annotations

import struct

from bfcrypt._utils.str import repeat_string
from bfcrypt.blowfish._tables import P_ORIG, S_ORIG

__all__ = ["BlowfishEngine", "key_stream"]

P_SIZE = len(P_ORIG)


def key_stream(data: bytes, count: int) -> list[int]:
    """read ``count`` big-endian 32-bit words from ``data``,
    wrapping around to the start of ``data`` whenever it is exhausted.
    """
    if not data:
        # nothing to cycle through, key material is all zero bits
        return [0] * count
    return list(struct.unpack(f">{count}I", repeat_string(data, count * 4)))


class BlowfishEngine:
    """mutable blowfish key schedule.

    A fresh instance starts out with the initial P-array and S-boxes.
    Instances are scratch space for a single hash computation and must not
    be shared between threads.
    """

    def __init__(self) -> None:
        self.P = list(P_ORIG)
        self.S = [list(box) for box in S_ORIG]

    def encipher(self, l: int, r: int) -> tuple[int, int]:
        """encrypt a single 64-bit block, given as its two 32-bit halves"""
        P = self.P
        S0, S1, S2, S3 = self.S
        l ^= P[0]
        for i in range(1, 17, 2):
            f = ((S0[l >> 24] + S1[(l >> 16) & 0xFF]) ^ S2[(l >> 8) & 0xFF]) + S3[l & 0xFF]
            r ^= (f & 0xFFFFFFFF) ^ P[i]
            f = ((S0[r >> 24] + S1[(r >> 16) & 0xFF]) ^ S2[(r >> 8) & 0xFF]) + S3[r & 0xFF]
            l ^= (f & 0xFFFFFFFF) ^ P[i + 1]
        # halves come out swapped
        return r ^ P[17], l

    def expand_key(self, key: bytes) -> None:
        """standard blowfish key schedule"""
        P = self.P
        for i, word in enumerate(key_stream(key, P_SIZE)):
            P[i] ^= word

        encipher = self.encipher
        l = r = 0
        for i in range(0, P_SIZE, 2):
            l, r = encipher(l, r)
            P[i] = l
            P[i + 1] = r
        for box in self.S:
            for i in range(0, 256, 2):
                l, r = encipher(l, r)
                box[i] = l
                box[i + 1] = r

    def expand_eks_key(self, salt: bytes, key: bytes) -> None:
        """bcrypt's salted key schedule.

        same as :meth:`expand_key`, except that two words of the (cyclic)
        salt stream are mixed into the block before every encryption.
        """
        P = self.P
        for i, word in enumerate(key_stream(key, P_SIZE)):
            P[i] ^= word

        # one pair of salt words per encryption: 9 for P, 4 * 128 for S
        salt_words = iter(key_stream(salt, P_SIZE + 4 * 256))
        encipher = self.encipher
        l = r = 0
        for i in range(0, P_SIZE, 2):
            l, r = encipher(l ^ next(salt_words), r ^ next(salt_words))
            P[i] = l
            P[i + 1] = r
        for box in self.S:
            for i in range(0, 256, 2):
                l, r = encipher(l ^ next(salt_words), r ^ next(salt_words))
                box[i] = l
                box[i + 1] = r
