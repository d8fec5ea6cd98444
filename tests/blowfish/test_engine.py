import pytest

from bfcrypt.blowfish import BlowfishEngine, key_stream
from bfcrypt.blowfish._tables import P_ORIG, S_ORIG


def test_tables_shape() -> None:
    assert len(P_ORIG) == 18
    assert len(S_ORIG) == 4
    assert all(len(box) == 256 for box in S_ORIG)
    assert all(0 <= word <= 0xFFFFFFFF for box in S_ORIG for word in box)
    # fractional part of pi
    assert P_ORIG[0] == 0x243F6A88
    assert S_ORIG[3][255] == 0x3AC372E6


@pytest.mark.parametrize(
    ("key", "plaintext", "ciphertext"),
    [
        # standard blowfish test vectors, by Eric Young
        ("0000000000000000", "0000000000000000", "4EF997456198DD78"),
        ("FFFFFFFFFFFFFFFF", "FFFFFFFFFFFFFFFF", "51866FD5B85ECB8A"),
        ("3000000000000000", "1000000000000001", "7D856F9A613063F2"),
        ("1111111111111111", "1111111111111111", "2466DD878B963C9D"),
        ("0123456789ABCDEF", "1111111111111111", "61F9C3802281B096"),
        ("1111111111111111", "0123456789ABCDEF", "7D0CC630AFDA1EC7"),
        ("FEDCBA9876543210", "0123456789ABCDEF", "0ACEAB0FC6A0A28D"),
    ],
)
def test_known_ciphertexts(key: str, plaintext: str, ciphertext: str) -> None:
    engine = BlowfishEngine()
    engine.expand_key(bytes.fromhex(key))

    block = int(plaintext, 16)
    l, r = engine.encipher(block >> 32, block & 0xFFFFFFFF)
    assert f"{l:08X}{r:08X}" == ciphertext


def test_fresh_engine_uses_initial_tables() -> None:
    engine = BlowfishEngine()
    engine.expand_key(b"secret")
    assert engine.P != list(P_ORIG)

    other = BlowfishEngine()
    assert other.P == list(P_ORIG)
    assert other.S == [list(box) for box in S_ORIG]


def test_encipher_does_not_modify_schedule() -> None:
    engine = BlowfishEngine()
    p, s = list(engine.P), [list(box) for box in engine.S]
    engine.encipher(0x01234567, 0x89ABCDEF)
    assert engine.P == p
    assert engine.S == s


def test_eks_key_depends_on_salt() -> None:
    first = BlowfishEngine()
    first.expand_eks_key(b"\x00" * 16, b"password\x00")
    second = BlowfishEngine()
    second.expand_eks_key(b"\x01" + b"\x00" * 15, b"password\x00")
    assert first.P != second.P
    assert first.S != second.S


def test_eks_key_with_zero_salt_matches_plain_schedule() -> None:
    # xor-ing zero salt words into the block is a no-op
    eks = BlowfishEngine()
    eks.expand_eks_key(b"\x00" * 16, b"key")
    plain = BlowfishEngine()
    plain.expand_key(b"key")
    assert eks.P == plain.P
    assert eks.S == plain.S


@pytest.mark.parametrize(
    ("data", "count", "expected"),
    [
        (b"\x01\x02\x03\x04", 1, [0x01020304]),
        (b"\x01\x02\x03\x04", 2, [0x01020304, 0x01020304]),
        (b"\x01\x02\x03", 2, [0x01020301, 0x02030102]),
        (b"\xff", 1, [0xFFFFFFFF]),
        (b"abcdefgh", 1, [0x61626364]),
        (b"", 3, [0, 0, 0]),
    ],
)
def test_key_stream(data: bytes, count: int, expected: list[int]) -> None:
    assert key_stream(data, count) == expected
