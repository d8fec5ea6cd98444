"""bfcrypt - pure-python bcrypt password hashing"""

from bfcrypt.errors import (
    ArgumentError,
    BcryptError,
    FormatError,
    MalformedHashError,
    RangeError,
)
from bfcrypt.hashers.bcrypt import (
    BcryptHasher,
    bcrypt_raw,
    generate_salt,
    hash_password,
    verify,
    work_factor,
)
from bfcrypt.inspect.bcrypt import (
    BcryptHashInfo,
    BcryptRevision,
    inspect_bcrypt_hash,
    parse_bcrypt_hash,
)

__version__ = "1.0.0"

__all__ = [
    "ArgumentError",
    "BcryptError",
    "BcryptHashInfo",
    "BcryptHasher",
    "BcryptRevision",
    "FormatError",
    "MalformedHashError",
    "RangeError",
    "bcrypt_raw",
    "generate_salt",
    "hash_password",
    "inspect_bcrypt_hash",
    "parse_bcrypt_hash",
    "verify",
    "work_factor",
]
