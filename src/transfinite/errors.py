"""Exceptions raised outside the surface core.

The evaluation core assumes well-formed input and does not raise; these
are used by the layers that read user descriptions.

Copyright (c) 2025 transfinite contributors
MIT License
"""

from __future__ import annotations


class TransfiniteError(Exception):
    """Base class for transfinite errors."""


class ConfigError(TransfiniteError):
    """A surface description is malformed."""

    def __init__(self, message: str, key: str | None = None):
        self.key = key
        if key is not None:
            message = f"{key}: {message}"
        super().__init__(message)
