from __future__ import annotations

from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from yawt.core.errors import ValidationError
from yawt.story.models import to_record
from yawt.story.normalize import normalize_required_string

M = TypeVar("M", bound=BaseModel)


def apply_required_string(updates: Dict[str, Any], payload: dict, key: str) -> None:
    """On update a required field may be omitted but never blanked."""
    if key in payload:
        value = payload[key]
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(f"{key} cannot be empty")
        updates[key] = normalize_required_string(value, key)


def optional_object(value: Any, model: Type[M], field: str) -> Optional[dict]:
    if value is None:
        return None
    if not isinstance(value, dict):
        raise ValidationError(f"{field} must be an object")
    try:
        return to_record(model(**value))
    except PydanticValidationError as exc:
        raise ValidationError(f"Invalid {field}: {exc}") from exc


def optional_object_list(value: Any, model: Type[M], field: str) -> Optional[List[dict]]:
    if value is None:
        return None
    if not isinstance(value, list):
        raise ValidationError(f"{field} must be a list")
    return [optional_object(v, model, field) for v in value if v is not None] or None


def optional_id(payload: dict, key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{key} must be a non-empty string")
    return value.strip()
