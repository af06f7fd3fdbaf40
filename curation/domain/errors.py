"""
Typed error model shared by all collection components.

Every `run_*` entry point reports failures as CollectionError values on its
output instead of raising. The transport layer maps `kind` to a status code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ErrorKind = Literal[
    "not_found",
    "permission_denied",
    "validation",
    "conflict",
    "dependency_unavailable",
]


@dataclass(frozen=True)
class CollectionError:
    """A single typed failure."""

    kind: ErrorKind
    code: str
    message: str
    field: str | None = None


class OutputErrorsMixin:
    """Adds `error_kind` to output dataclasses carrying an `errors` list."""

    errors: list[CollectionError]

    @property
    def error_kind(self) -> ErrorKind | None:
        return self.errors[0].kind if self.errors else None


def not_found(message: str = "Collection not found", code: str = "not_found") -> CollectionError:
    return CollectionError(kind="not_found", code=code, message=message)


def permission_denied(message: str, code: str = "permission_denied") -> CollectionError:
    return CollectionError(kind="permission_denied", code=code, message=message)


def conflict(message: str, code: str = "conflict", field: str | None = None) -> CollectionError:
    return CollectionError(kind="conflict", code=code, message=message, field=field)


def invalid(code: str, message: str, field: str | None = None) -> CollectionError:
    return CollectionError(kind="validation", code=code, message=message, field=field)


def unavailable(message: str = "Storage unavailable") -> CollectionError:
    return CollectionError(kind="dependency_unavailable", code="storage_unavailable", message=message)
