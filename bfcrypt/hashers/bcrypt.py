"""pure-python implementation of OpenBSD's bcrypt password hash"""

from __future__ import annotations

import struct

from bfcrypt._logging import logger
from bfcrypt._salt import generate_salt_bytes
from bfcrypt._utils.bytes import StrOrBytes, as_bytes, as_str
from bfcrypt._utils.const import (
    BCRYPT_DEFAULT_REVISION,
    BCRYPT_DEFAULT_ROUNDS,
    BCRYPT_SALT_SIZE,
)
from bfcrypt._utils.str import consteq
from bfcrypt._utils.validation import validate_rounds
from bfcrypt.blowfish import BlowfishEngine
from bfcrypt.errors import ArgumentError, FormatError
from bfcrypt.hashers.abc import PasswordHasher
from bfcrypt.inspect.bcrypt import (
    BcryptHashInfo,
    BcryptRevision,
    inspect_bcrypt_hash,
    parse_bcrypt_hash,
    parse_work_factor,
    validate_revision,
)

__all__ = [
    "BcryptHasher",
    "bcrypt_raw",
    "generate_salt",
    "hash_password",
    "verify",
    "work_factor",
]

# "OrpheanBeholderScryDoubt", encrypted 64 times to produce the digest
_MAGIC_WORDS = struct.unpack(">6I", b"OrpheanBeholderScryDoubt")


def bcrypt_raw(secret: bytes, salt: bytes, rounds: int) -> bytes:
    """perform raw bcrypt

    :arg secret: key material, including the trailing NUL for 2a and later.
    :arg salt: 16 raw salt bytes.
    :arg rounds: log2 of the number of key expansion rounds.
    :returns: 24 byte digest (only 23 of which are used by the hash format).
    """
    validate_rounds(rounds)
    if len(salt) != BCRYPT_SALT_SIZE:
        msg = f"salt must be {BCRYPT_SALT_SIZE} bytes, got {len(salt)}"
        raise FormatError(msg)

    logger.debug("bcrypt: cost %d (%d rounds)", rounds, 1 << rounds)

    engine = BlowfishEngine()
    engine.expand_eks_key(salt, secret)

    expand_key = engine.expand_key
    for _ in range(1 << rounds):
        expand_key(secret)
        expand_key(salt)

    encipher = engine.encipher
    words: list[int] = []
    for i in range(0, len(_MAGIC_WORDS), 2):
        l, r = _MAGIC_WORDS[i], _MAGIC_WORDS[i + 1]
        for _ in range(64):
            l, r = encipher(l, r)
        words += (l, r)
    return struct.pack(f">{len(words)}I", *words)


def _key_material(secret: bytes, revision: BcryptRevision) -> bytes:
    if revision == "2":
        return secret

    if revision == "2x" and any(c & 0x80 for c in secret):
        logger.warning(
            "computing $2x$ hash of a password containing 8-bit characters; "
            "crypt_blowfish's sign extension bug is not reproduced, "
            "so it will not match legacy $2x$ hashes"
        )
    # 2a and later hash the terminating NUL as well
    return secret + b"\x00"


def generate_salt(
    rounds: int = BCRYPT_DEFAULT_ROUNDS,
    revision: BcryptRevision = BCRYPT_DEFAULT_REVISION,
) -> str:
    """
    :param rounds: log2 of the number of rounds, between 4 and 31
    :param revision: revision tag to put into the salt string
    :return: salt string, e.g. ``$2b$10$<22 chars>``
    """
    validate_rounds(rounds)
    validate_revision(revision)
    return BcryptHashInfo.from_bytes(
        revision=revision,
        rounds=rounds,
        salt=generate_salt_bytes(BCRYPT_SALT_SIZE),
    ).config


def hash_password(
    secret: StrOrBytes,
    salt: StrOrBytes | None = None,
    *,
    rounds: int = BCRYPT_DEFAULT_ROUNDS,
    revision: BcryptRevision = BCRYPT_DEFAULT_REVISION,
    strict: bool = False,
) -> str:
    """
    :param secret: Secret to hash, str secrets are encoded as utf-8
    :param salt:
        Salt string as returned by :func:`generate_salt`, or an existing hash.
        A new salt is generated from ``rounds`` and ``revision`` if omitted.
    :param strict: Reject salts with characters outside of the bcrypt alphabet
    :return: Hash
    """
    if secret is None:
        raise ArgumentError("secret must not be None")
    if salt is None:
        salt = generate_salt(rounds=rounds, revision=revision)
    elif not salt:
        raise ArgumentError("salt must not be empty")

    info = parse_bcrypt_hash(as_str(salt))
    salt_bytes = info.decode_salt(strict=strict)
    if len(salt_bytes) != BCRYPT_SALT_SIZE:
        logger.debug("salt decoding stopped after %d bytes", len(salt_bytes))

    digest = bcrypt_raw(
        secret=_key_material(as_bytes(secret), info.revision),
        salt=salt_bytes,
        rounds=info.rounds,
    )
    return BcryptHashInfo.from_bytes(
        revision=info.revision,
        rounds=info.rounds,
        salt=salt_bytes,
        digest=digest,
    ).as_str()


def verify(secret: StrOrBytes, hash: StrOrBytes, *, strict: bool = False) -> bool:
    if not hash:
        raise ArgumentError("hash must not be empty")
    hash = as_str(hash)
    return consteq(hash, hash_password(secret, hash, strict=strict))


def work_factor(hash: StrOrBytes) -> int:
    return parse_work_factor(as_str(hash))


class BcryptHasher(PasswordHasher):
    def __init__(
        self,
        rounds: int = BCRYPT_DEFAULT_ROUNDS,
        revision: BcryptRevision = BCRYPT_DEFAULT_REVISION,
        *,
        strict: bool = False,
    ) -> None:
        validate_rounds(rounds)
        validate_revision(revision)
        self._rounds = rounds
        self.revision = revision
        self._strict = strict

    def hash(
        self,
        secret: StrOrBytes,
        *,
        salt: StrOrBytes | None = None,
    ) -> str:
        """
        :param secret: Secret to hash
        :param salt: Salt, as returned by :func:`generate_salt`
        :return: Hash
        """
        return hash_password(
            secret,
            salt,
            rounds=self._rounds,
            revision=self.revision,
            strict=self._strict,
        )

    def verify(self, hash: StrOrBytes, secret: StrOrBytes) -> bool:
        return verify(secret, hash, strict=self._strict)

    def identify(self, hash: StrOrBytes) -> bool:
        return inspect_bcrypt_hash(as_str(hash)) is not None

    def needs_update(self, hash: StrOrBytes) -> bool:
        info = inspect_bcrypt_hash(as_str(hash))
        if info is None:
            return True
        return info.rounds != self._rounds
