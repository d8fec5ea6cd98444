from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

import bcrypt
import pytest

from bfcrypt import (
    ArgumentError,
    BcryptHasher,
    FormatError,
    RangeError,
    bcrypt_raw,
    generate_salt,
    hash_password,
    verify,
    work_factor,
)
from bfcrypt.inspect.bcrypt import inspect_bcrypt_hash, parse_bcrypt_hash

CONFIG_2 = "$2$05$" + "." * 22
CONFIG_A = "$2a$05$" + "." * 22

KNOWN_HASHES = [
    #
    # from py-bcrypt tests
    #
    ("", "$2a$06$DCq7YPn5Rq63x1Lad4cll.TV4S6ytwfsfvkgY8jIucDrjc8deX1s."),
    ("a", "$2a$06$m0CrhHm10qJ3lXRY.5zDGO3rS2KdeeWLuGmsfGlMfOxih58VYVfxe"),
    #
    # from JTR 1.7.9
    #
    ("U*U*U*U*", "$2a$05$c92SVSfjeiCD6F2nAD6y0uBpJDjdRkt0EgeC4/31Rf2LUZbDRDE.O"),
    ("U*U***U", "$2a$05$WY62Xk2TXZ7EvVDQ5fmjNu7b0GEzSzUXUh2cllxJwhtOeMtWV3Ujq"),
    ("*U*U*U*U", "$2a$05$.WRrXibc1zPgIdRXYfv.4uu6TD1KWf0VnHzq/0imhUhuxSxCyeBs2"),
    ("", "$2a$05$Otz9agnajgrAe0.kFVF9V.tzaStZ2s1s4ZWi/LY4sw2k/MTVFj/IO"),
    #
    # from http://www.openwall.com/crypt v1.2
    #
    ("U*U", "$2a$05$CCCCCCCCCCCCCCCCCCCCC.E5YPO9kmyuRGyh0XouQYb4YMJKvyOeW"),
    ("U*U*U", "$2a$05$XXXXXXXXXXXXXXXXXXXXXOAcXxm9kjPGEMsLznoKqmqw7tc8WCx4a"),
    (
        "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"
        "0123456789chars after 72 are ignored",
        "$2a$05$abcdefghijklmnopqrstuu5s2v8.iXieOjg/.AySBTTZIIVFJeBui",
    ),
    (b"\xa3", "$2a$05$/OK.fbVrR/bpIqNJ5ianF.Sa7shbm4.OzKpvFnX1pQLmQW96oUlCq"),
    (b"\xa3", "$2y$05$/OK.fbVrR/bpIqNJ5ianF.Sa7shbm4.OzKpvFnX1pQLmQW96oUlCq"),
    (b"\xff\xa3345", "$2a$05$/OK.fbVrR/bpIqNJ5ianF.nRht2l/HRhr6zmCp9vYUvvsqynflf9e"),
    (
        b"\xaa" * 72 + b"chars after 72 are ignored as usual",
        "$2a$05$/OK.fbVrR/bpIqNJ5ianF.swQOIzjOiJ9GHEPuhEkvqrUyvWhEMx6",
    ),
    (b"\xd1\x91", "$2y$05$6bNw2HLQYeqHYyBfLMsv/OUcZd0LKP39b87nBw3.S2tVZSqiQX6eu"),
    #
    # no wraparound of long passwords
    #
    (
        ("0123456789" * 26)[:254],
        "$2a$04$R1lJ2gkNaoPGdafE.H.16.1MKHPvmKwryeulRe225LKProWYwt9Oi",
    ),
    (
        ("0123456789" * 26)[:255],
        "$2a$04$R1lJ2gkNaoPGdafE.H.16.1MKHPvmKwryeulRe225LKProWYwt9Oi",
    ),
    #
    # revisions
    #
    ("test", "$2$04$5BJqKfqMQvV7nS.yUguNcuRfMMOXK0xPWavM7pOzjEi5ze5T1k8/S"),
    ("test", "$2a$04$5BJqKfqMQvV7nS.yUguNcueVirQqDBGaLXSqj.rs.pZPlNR0UX/HK"),
    ("test", "$2x$04$5BJqKfqMQvV7nS.yUguNcueVirQqDBGaLXSqj.rs.pZPlNR0UX/HK"),
    ("", CONFIG_2 + "J2ihDv8vVf7QZ9BsaRrKyqs2tkn55Yq"),
    ("", CONFIG_A + "J2ihDv8vVf7QZ9BsaRrKyqs2tkn55Yq"),
    ("abc", CONFIG_2 + "XuQjdH.wPVNUZ/bOfstdW/FqB8QSjte"),
    ("abc", CONFIG_A + "ev6gDwpVye3oMCUpLY85aTpfBNHD0Ga"),
    # key stream wraps at 72 bytes, NUL terminator only counts below that
    ("abc" * 23, CONFIG_2 + "XuQjdH.wPVNUZ/bOfstdW/FqB8QSjte"),
    ("abc" * 23, CONFIG_A + "2kIdfSj/4/R/Q6n847VTvc68BXiRYZC"),
    ("abc" * 24, CONFIG_A + "XuQjdH.wPVNUZ/bOfstdW/FqB8QSjte"),
]


@pytest.mark.parametrize(("secret", "hash"), KNOWN_HASHES)
def test_known_hashes(secret: str | bytes, hash: str) -> None:
    assert hash_password(secret, hash) == hash
    assert verify(secret, hash)


@pytest.mark.parametrize(("secret", "hash"), KNOWN_HASHES[:6])
def test_known_hashes_wrong_secret(secret: str | bytes, hash: str) -> None:
    assert not verify("wrong", hash)


def test_hash_from_salt_string() -> None:
    salt = "$2a$06$DCq7YPn5Rq63x1Lad4cll."
    assert (
        hash_password("", salt)
        == "$2a$06$DCq7YPn5Rq63x1Lad4cll.TV4S6ytwfsfvkgY8jIucDrjc8deX1s."
    )


def test_str_and_bytes_secrets_match() -> None:
    salt = "$2b$04$" + "." * 22
    assert hash_password("táБ", salt) == hash_password(
        "táБ".encode(), salt
    )


def test_deterministic() -> None:
    salt = generate_salt(4)
    assert hash_password("password", salt) == hash_password("password", salt)


def test_distinct_salts() -> None:
    first = hash_password("password", rounds=4)
    second = hash_password("password", rounds=4)
    assert first != second
    assert verify("password", first)
    assert verify("password", second)


@pytest.mark.parametrize("revision", ["2", "2a", "2b", "2x", "2y"])
def test_revision_roundtrip(revision: str) -> None:
    hash = hash_password("password", rounds=4, revision=revision)
    info = parse_bcrypt_hash(hash)
    assert info.revision == revision
    assert hash.startswith(f"${revision}$04$")
    assert len(hash) == len(f"${revision}$04$") + 53
    assert verify("password", hash)


def test_revision_2_omits_nul() -> None:
    salt = "." * 22
    assert hash_password("abc", "$2$04$" + salt)[6:] != hash_password(
        "abc", "$2a$04$" + salt
    )[7:]
    # minor revisions only differ in the tag
    assert (
        hash_password("abc", "$2a$04$" + salt)[7:]
        == hash_password("abc", "$2b$04$" + salt)[7:]
        == hash_password("abc", "$2y$04$" + salt)[7:]
    )


def test_empty_secret_revision_2() -> None:
    hash = hash_password("", "$2$04$" + "." * 22)
    assert verify("", hash)
    assert not verify("a", hash)


@pytest.mark.parametrize("rounds", [4, 5, 6])
def test_work_factor(rounds: int) -> None:
    assert work_factor(hash_password("secret", rounds=rounds)) == rounds


def test_generate_salt() -> None:
    salt = generate_salt(4, "2y")
    assert salt.startswith("$2y$04$")
    assert len(salt) == 29
    assert generate_salt().startswith("$2b$10$")
    assert generate_salt(4) != generate_salt(4)


@pytest.mark.parametrize("rounds", [-1, 0, 3, 32, 100])
def test_generate_salt_rounds_range(rounds: int) -> None:
    with pytest.raises(RangeError):
        generate_salt(rounds)


def test_generate_salt_revision() -> None:
    with pytest.raises(FormatError):
        generate_salt(4, "2c")  # type: ignore[arg-type]


@pytest.mark.parametrize(
    "salt",
    [
        "$2a$03$" + "." * 22,
        "$2a$32$" + "." * 22,
        "$2b$00$" + "." * 22,
    ],
)
def test_hash_rounds_range(salt: str) -> None:
    with pytest.raises(RangeError):
        hash_password("password", salt)


@pytest.mark.parametrize(
    "salt",
    [
        "$3$10$" + "." * 22,
        "$2z$10$" + "." * 22,
        "$2a$10" + "." * 23,
        "$2a$04$" + "." * 21,
        # lenient decoding stops early, leaving less than 16 salt bytes
        "$2a$04$!" + "." * 21,
        "$2a$04$" + "." * 10 + "!" + "." * 11,
    ],
)
def test_hash_malformed_salt(salt: str) -> None:
    with pytest.raises(FormatError):
        hash_password("password", salt)


def test_hash_strict_salt() -> None:
    # last salt char has non-zero padding bits
    salt = "$2a$04$" + "." * 21 + "/"
    assert hash_password("password", salt).startswith("$2a$04$" + "." * 22)
    with pytest.raises(FormatError):
        hash_password("password", salt, strict=True)


def test_hash_argument_errors() -> None:
    with pytest.raises(ArgumentError):
        hash_password(None, generate_salt(4))  # type: ignore[arg-type]
    with pytest.raises(ArgumentError):
        hash_password("password", "")
    with pytest.raises(ArgumentError):
        verify("password", "")


def test_verify_malformed() -> None:
    with pytest.raises(FormatError):
        verify("password", "$2z$04$" + "." * 53)


def test_verify_config_string() -> None:
    # a bare salt never matches a full hash
    assert not verify("password", "$2a$04$" + "." * 22)


def test_bcrypt_raw() -> None:
    digest = bcrypt_raw(b"password\x00", b"\x00" * 16, 4)
    assert len(digest) == 24
    assert digest == bcrypt_raw(b"password\x00", b"\x00" * 16, 4)
    assert digest != bcrypt_raw(b"password\x00", b"\x01" * 16, 4)


@pytest.mark.parametrize("rounds", [3, 32])
def test_bcrypt_raw_rounds(rounds: int) -> None:
    with pytest.raises(RangeError):
        bcrypt_raw(b"password", b"\x00" * 16, rounds)


@pytest.mark.parametrize("salt", [b"", b"\x00" * 15, b"\x00" * 17])
def test_bcrypt_raw_salt_size(salt: bytes) -> None:
    with pytest.raises(FormatError):
        bcrypt_raw(b"password", salt, 4)


def test_2x_8bit_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="bfcrypt"):
        hash_password(b"\xa3", "$2x$04$" + "." * 22)
    assert "$2x$" in caplog.text

    caplog.clear()
    with caplog.at_level(logging.WARNING, logger="bfcrypt"):
        hash_password(b"\xa3", "$2a$04$" + "." * 22)
        hash_password("ascii", "$2x$04$" + "." * 22)
    assert not caplog.records


def test_concurrent_hashing() -> None:
    salt = generate_salt(4)
    with ThreadPoolExecutor(max_workers=4) as executor:
        results = list(executor.map(lambda _: hash_password("secret", salt), range(8)))
    assert len(set(results)) == 1


@pytest.mark.parametrize(
    "secret",
    [b"", b"password", b"\x01\x7f\xff", "táБ".encode(), b"x" * 72],
)
def test_matches_bcrypt_library(secret: bytes) -> None:
    salt = generate_salt(4, "2b")
    hash = hash_password(secret, salt)
    assert hash == bcrypt.hashpw(secret, salt.encode()).decode()
    assert bcrypt.checkpw(secret, hash.encode())

    reference = bcrypt.hashpw(secret, bcrypt.gensalt(rounds=4))
    assert verify(secret, reference)


class TestBcryptHasher:
    @pytest.fixture
    def hasher(self) -> BcryptHasher:
        return BcryptHasher(rounds=4)

    @pytest.mark.parametrize("secret", ["a", "a" * 72, "a" * 73, ""])
    def test_hash_and_validate(self, hasher: BcryptHasher, secret: str) -> None:
        hash = hasher.hash(secret)
        assert hasher.verify(hash, secret)
        assert not hasher.verify(hash, "x" + secret)

    def test_hash_with_salt(self, hasher: BcryptHasher) -> None:
        hash = hasher.hash("U*U*U*U*", salt="$2a$05$c92SVSfjeiCD6F2nAD6y0u")
        assert hash == "$2a$05$c92SVSfjeiCD6F2nAD6y0uBpJDjdRkt0EgeC4/31Rf2LUZbDRDE.O"

    @pytest.mark.parametrize(("rounds", "revision"), [(4, "2b"), (5, "2a"), (4, "2")])
    def test_settings(self, rounds: int, revision: str) -> None:
        hasher = BcryptHasher(rounds=rounds, revision=revision)  # type: ignore[arg-type]
        info = inspect_bcrypt_hash(hasher.hash("Secret"))
        assert info
        assert info.rounds == rounds
        assert info.revision == revision

    @pytest.mark.parametrize("rounds", [3, 32])
    def test_invalid_rounds(self, rounds: int) -> None:
        with pytest.raises(RangeError):
            BcryptHasher(rounds=rounds)

    def test_invalid_revision(self) -> None:
        with pytest.raises(FormatError):
            BcryptHasher(revision="2c")  # type: ignore[arg-type]

    def test_identify(self, hasher: BcryptHasher) -> None:
        assert hasher.identify(hasher.hash("Secret"))
        assert hasher.identify(KNOWN_HASHES[0][1].encode())
        assert not hasher.identify("$2a$04$" + "." * 22)
        assert not hasher.identify("Random String")

    def test_needs_update(self, hasher: BcryptHasher) -> None:
        assert not hasher.needs_update(hasher.hash("Secret"))
        assert hasher.needs_update(BcryptHasher(rounds=5).hash("Secret"))
        assert hasher.needs_update("$5$saltstring$5B8vYYiY.CVt1RlTTf8KbXBH3hsxY/GNooZaBBGWEc5")
        assert hasher.needs_update("Random String")

    def test_strict(self) -> None:
        hasher = BcryptHasher(rounds=4, strict=True)
        with pytest.raises(FormatError):
            hasher.hash("Secret", salt="$2b$04$" + "." * 21 + "/")
