import secrets

from bfcrypt._utils.const import BCRYPT_SALT_SIZE


def generate_salt_bytes(size: int = BCRYPT_SALT_SIZE) -> bytes:
    return secrets.token_bytes(size)
