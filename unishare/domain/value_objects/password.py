"""Password policy"""

from ..exceptions import InvalidInputError

MIN_PASSWORD_LENGTH = 6


def ensure_strong_password(raw_password: str) -> None:
    """Reject passwords that are too short or carry no digit."""
    if not raw_password or len(raw_password) < MIN_PASSWORD_LENGTH:
        raise InvalidInputError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters", field="password"
        )
    if not any(ch.isdigit() for ch in raw_password):
        raise InvalidInputError("Password must contain at least one number", field="password")
