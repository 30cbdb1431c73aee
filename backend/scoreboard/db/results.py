"""
Outcomes returned by the store functions.

A lookup either yields the entity, ``NOT_FOUND`` when no single row matched,
or ``Failed`` when the database could not answer. Empty listings are plain
empty lists.
"""
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class NotFound:
    def __repr__(self):
        return "NOT_FOUND"

    def __bool__(self):
        return False


class AlreadyExists:
    def __repr__(self):
        return "ALREADY_EXISTS"

    def __bool__(self):
        return False


NOT_FOUND = NotFound()
ALREADY_EXISTS = AlreadyExists()


@dataclass(frozen=True)
class Failed:
    cause: str

    def __bool__(self):
        return False


@dataclass
class Skipped:
    item: Any
    reason: str


@dataclass
class BulkResult(Generic[T]):
    inserted: list[T] = field(default_factory=list)
    skipped: list[Skipped] = field(default_factory=list)
    # False when there was nothing to attempt
    completed: bool = True
