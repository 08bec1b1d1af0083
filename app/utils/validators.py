from uuid import UUID
from app.core.exceptions import ValidationError

def validate_and_convert_uuid(value: str) -> str:
    """Validate and convert UUID input to string"""
    try:
        return str(UUID(str(value)))
    except ValueError:
        raise ValidationError("Invalid UUID format")
