# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Scene frontmatter.

A scene may start with a block delimited by ``---`` lines::

    ---
    title: The Heist
    timelines: [main]
    startDate: 2024-03-01
    ---
    Body text...

Anything that is not a well-formed, reasonably sized mapping yields empty
metadata. The whole text is then returned as the body, untouched.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

import yaml

from yawt.story.models import SceneDerived
from yawt.story.normalize import (
    normalize_optional_string,
    normalize_optional_string_list,
)

MAX_FRONTMATTER_BYTES = 64 * 1024

_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(?P<block>.*?)^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


@dataclass(frozen=True)
class FrontmatterResult:
    attributes: Dict[str, Any] = field(default_factory=dict)
    body: str = ""


@dataclass(frozen=True)
class DerivedScene:
    fields: SceneDerived
    body: str


def extract_frontmatter(text: str) -> FrontmatterResult:
    match = _FRONTMATTER_RE.match(text)
    if not match:
        return FrontmatterResult({}, text)

    block = match.group("block")
    if len(block.encode("utf-8")) > MAX_FRONTMATTER_BYTES:
        return FrontmatterResult({}, text)

    try:
        parsed = yaml.safe_load(block)
    except (yaml.YAMLError, ValueError, RecursionError):
        # ValueError: YAML timestamps such as 2024-13-45 fail during construction.
        return FrontmatterResult({}, text)

    attributes = parsed if isinstance(parsed, dict) else {}
    return FrontmatterResult(attributes, text[match.end():])


def _first(attributes: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = attributes.get(key)
        if value is not None:
            return value
    return None


def _chapter(value: Any) -> Optional[Union[int, float, str]]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        return value.strip() or None
    return None


def derive(text: str) -> DerivedScene:
    result = extract_frontmatter(text)
    attrs = result.attributes

    fields = SceneDerived(
        title=normalize_optional_string(attrs.get("title")),
        chapter=_chapter(attrs.get("chapter")),
        section=normalize_optional_string(attrs.get("section")),
        timeline_ids=normalize_optional_string_list(
            _first(attrs, "timelineIds", "timeline_ids", "timelines", "timeline")
        ),
        location_id=normalize_optional_string(
            _first(attrs, "locationId", "location_id", "location")
        ),
        character_ids=normalize_optional_string_list(
            _first(attrs, "characterIds", "character_ids", "characters")
        ),
        tags=normalize_optional_string_list(_first(attrs, "tags", "plotlines")),
        start_date=normalize_optional_string(_first(attrs, "startDate", "start_date")),
        end_date=normalize_optional_string(_first(attrs, "endDate", "end_date")),
    )
    return DerivedScene(fields=fields, body=result.body)


def derive_scene_fields(text: str) -> SceneDerived:
    return derive(text).fields
