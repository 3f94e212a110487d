from marshmallow import ValidationError

PASSWORD_MIN_LENGTH = 8


def normalize_email(value):
    return value.strip().lower() if isinstance(value, str) else value


def validate_password_strength(value: str) -> None:
    """Require a minimum length plus at least one letter and one digit."""
    if value is None or len(value) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long.")
    if not any(ch.isalpha() for ch in value):
        raise ValidationError("Password must contain at least one letter.")
    if not any(ch.isdigit() for ch in value):
        raise ValidationError("Password must contain at least one digit.")


def validate_not_blank(value: str) -> None:
    if value is None or not value.strip():
        raise ValidationError("Field may not be blank.")
