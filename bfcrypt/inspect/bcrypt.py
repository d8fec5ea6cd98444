from __future__ import annotations

import dataclasses
import re
from typing import Literal

from typing_extensions import Self

from bfcrypt._utils.binary import bcrypt64
from bfcrypt._utils.const import (
    BCRYPT_DIGEST_SIZE,
    BCRYPT_SALT_CHARS,
    BCRYPT_SALT_SIZE,
)
from bfcrypt.errors import ArgumentError, FormatError

__all__ = [
    "BCRYPT_REVISIONS",
    "BcryptHashInfo",
    "BcryptRevision",
    "inspect_bcrypt_hash",
    "parse_bcrypt_hash",
    "parse_work_factor",
    "validate_revision",
]

BcryptRevision = Literal["2", "2a", "2b", "2x", "2y"]
BCRYPT_REVISIONS: tuple[BcryptRevision, ...] = ("2", "2a", "2b", "2x", "2y")

# keyed by the letter following "$2", "" for the original revision
_REVISION_BY_MINOR: dict[str, BcryptRevision] = {
    revision[1:]: revision for revision in BCRYPT_REVISIONS
}

BCRYPT_HASH_REGEX = re.compile(
    r"\$(?P<revision>2[abxy]?)\$(?P<rounds>[0-9]{2})"
    r"\$(?P<salt>[./A-Za-z0-9]{22})(?P<hash>[./A-Za-z0-9]{31})"
)

_DIGITS = frozenset("0123456789")


@dataclasses.dataclass
class BcryptHashInfo:
    revision: BcryptRevision
    rounds: int
    salt: str
    hash: str = ""

    @property
    def config(self) -> str:
        """salt string, i.e. everything except the digest"""
        return f"${self.revision}${self.rounds:02}${self.salt}"

    def as_str(self) -> str:
        return f"{self.config}{self.hash}"

    def decode_salt(self, *, strict: bool = False) -> bytes:
        return bcrypt64.decode_bytes(
            self.salt.encode("utf-8"), BCRYPT_SALT_SIZE, strict=strict
        )

    def decode_digest(self, *, strict: bool = False) -> bytes:
        if not self.hash:
            return b""
        return bcrypt64.decode_bytes(
            self.hash.encode("utf-8"), BCRYPT_DIGEST_SIZE, strict=strict
        )

    @classmethod
    def from_bytes(
        cls,
        revision: BcryptRevision,
        rounds: int,
        salt: bytes,
        digest: bytes = b"",
    ) -> Self:
        return cls(
            revision=revision,
            rounds=rounds,
            salt=bcrypt64.encode_bytes(salt).decode("ascii"),
            hash=bcrypt64.encode_bytes(digest[:BCRYPT_DIGEST_SIZE]).decode("ascii"),
        )


def validate_revision(revision: str) -> None:
    if revision not in BCRYPT_REVISIONS:
        msg = f"revision must be one of {', '.join(BCRYPT_REVISIONS)}, got {revision!r}"
        raise FormatError(msg)


def _parse_revision(value: str) -> tuple[BcryptRevision, int]:
    """returns revision and offset of the cost field"""
    if value[:2] != "$2" or len(value) < 3:
        raise FormatError("invalid salt version")
    if value[2] == "$":
        return _REVISION_BY_MINOR[""], 3

    revision = _REVISION_BY_MINOR.get(value[2])
    if revision is None or value[3:4] != "$":
        raise FormatError("invalid salt revision")
    return revision, 4


def _parse_rounds(value: str, offset: int) -> int:
    rounds = value[offset : offset + 2]
    if value[offset + 2 : offset + 3] != "$":
        raise FormatError("missing salt rounds")
    if len(rounds) != 2 or not _DIGITS.issuperset(rounds):
        raise FormatError(f"malformed cost field: {rounds!r}")
    return int(rounds)


def parse_bcrypt_hash(value: str) -> BcryptHashInfo:
    """
    Parses a bcrypt salt (``$2b$12$<22 chars>``) or full hash string.

    Only the layout is checked here: the cost is not range-checked, and salt
    and digest characters are only validated once decoded.
    """
    revision, offset = _parse_revision(value)
    rounds = _parse_rounds(value, offset)

    start = offset + 3
    salt = value[start : start + BCRYPT_SALT_CHARS]
    if len(salt) != BCRYPT_SALT_CHARS:
        raise FormatError(
            f"salt must be {BCRYPT_SALT_CHARS} characters, got {len(salt)}"
        )
    return BcryptHashInfo(
        revision=revision,
        rounds=rounds,
        salt=salt,
        hash=value[start + BCRYPT_SALT_CHARS :],
    )


def parse_work_factor(value: str) -> int:
    """Extracts cost of a bcrypt hash, without looking at salt or digest"""
    if not value:
        raise ArgumentError("hash must not be empty")
    if len(value) < 7:
        raise ArgumentError(f"hash is too short: {value!r}")

    _, offset = _parse_revision(value)
    return _parse_rounds(value, offset)


def inspect_bcrypt_hash(hash: str) -> BcryptHashInfo | None:
    result = BCRYPT_HASH_REGEX.fullmatch(hash)
    if not result:
        return None

    return BcryptHashInfo(
        revision=_REVISION_BY_MINOR[result.group("revision")[1:]],
        rounds=int(result.group("rounds")),
        salt=result.group("salt"),
        hash=result.group("hash"),
    )
