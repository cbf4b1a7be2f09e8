# storefront/utils/ids.py
import uuid
from typing import Any

from storefront.domain.errors import ValidationError


def parse_uuid(value: Any, message: str) -> uuid.UUID:
    """Id z requestu -> UUID, inaczej 400 z podanym komunikatem."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        raise ValidationError(message)
