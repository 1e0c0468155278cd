# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Centralizes the "trim, empty means absent" rules shared by payload handling and frontmatter.

from __future__ import annotations

import datetime
from typing import Any, Dict, List, Optional

from pydantic import JsonValue, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from yawt.core.errors import ValidationError

_EXTRA_ADAPTER = TypeAdapter(Dict[str, JsonValue])


def normalize_optional_string(value: Any) -> Optional[str]:
    """Coerce scalars to a trimmed string; blank or unsupported values become ``None``."""
    if value is None:
        return None
    if isinstance(value, str):
        v = value.strip()
        return v or None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return None


def normalize_optional_string_list(value: Any) -> Optional[List[str]]:
    """Accept one string or a list; keep trimmed, non-empty, first-seen strings."""
    if value is None:
        return None
    if isinstance(value, str):
        single = value.strip()
        return [single] if single else None
    if isinstance(value, (list, tuple)):
        result: List[str] = []
        for item in value:
            if not isinstance(item, str):
                continue
            item = item.strip()
            if item and item not in result:
                result.append(item)
        return result or None
    return None


def normalize_required_string(value: Any, field: str) -> str:
    result = value.strip() if isinstance(value, str) else ""
    if not result:
        raise ValidationError(f"{field} is required")
    return result


def normalize_extra(value: Any) -> Optional[Dict[str, JsonValue]]:
    """Validate a free-form attribute bag; non-objects are dropped."""
    if value is None or not isinstance(value, dict):
        return None
    try:
        return _EXTRA_ADAPTER.validate_python(value)
    except PydanticValidationError as exc:
        raise ValidationError(f"extra must contain only JSON values: {exc}") from exc


def apply_optional_string(updates: Dict[str, Any], payload: dict, key: str, field: Optional[str] = None) -> None:
    """Copy ``payload[key]`` into ``updates`` when present; blank clears the field."""
    if key in payload:
        updates[field or key] = normalize_optional_string(payload[key])


def apply_optional_string_list(updates: Dict[str, Any], payload: dict, key: str, field: Optional[str] = None) -> None:
    if key in payload:
        updates[field or key] = normalize_optional_string_list(payload[key])
