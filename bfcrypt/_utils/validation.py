from bfcrypt._utils.const import BCRYPT_MAX_ROUNDS, BCRYPT_MIN_ROUNDS
from bfcrypt.errors import RangeError


def validate_rounds(
    rounds: int, min: int = BCRYPT_MIN_ROUNDS, max: int = BCRYPT_MAX_ROUNDS
) -> None:
    if rounds < min or rounds > max:
        msg = f"rounds must be between {min} - {max}, got {rounds}"
        raise RangeError(msg)
