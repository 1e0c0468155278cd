# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
# Purpose: Defines the error taxonomy so services stay HTTP-agnostic while routes can map each kind to a status code.

from __future__ import annotations


class YawtError(Exception):
    def __init__(self, detail: str, status_code: int = 400):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


class ValidationError(YawtError):
    """Malformed input: bad payload fields, bad ranks, bad reorder references."""

    def __init__(self, detail: str):
        super().__init__(detail=detail, status_code=400)


class UnauthorizedError(YawtError):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(detail=detail, status_code=401)


class NotFoundError(YawtError):
    def __init__(self, detail: str = "Not found"):
        super().__init__(detail=detail, status_code=404)


class NotEmptyError(YawtError):
    """A parent still owns children and refuses to be deleted."""

    def __init__(self, detail: str):
        super().__init__(detail=detail, status_code=409)


class ConflictError(YawtError):
    """An atomic commit lost against a concurrent write. Safe to retry."""

    def __init__(self, detail: str):
        super().__init__(detail=detail, status_code=500)


class StorageError(YawtError):
    """The store could not persist a commit; nothing was applied."""

    def __init__(self, detail: str):
        super().__init__(detail=detail, status_code=500)
