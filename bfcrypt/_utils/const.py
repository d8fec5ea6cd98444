from typing import Final

BCRYPT_DEFAULT_ROUNDS: Final = 10
BCRYPT_DEFAULT_REVISION: Final = "2b"

BCRYPT_MIN_ROUNDS: Final = 4
# 1 << rounds must fit the 32-bit round counter of the reference implementations
BCRYPT_MAX_ROUNDS: Final = 31

BCRYPT_SALT_SIZE: Final = 16
# bcrypt_raw() produces 24 bytes, the last one is never encoded
BCRYPT_DIGEST_SIZE: Final = 23

BCRYPT_SALT_CHARS: Final = 22
