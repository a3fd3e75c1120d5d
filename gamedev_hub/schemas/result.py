from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class Lookup(Generic[T]):
    """Outcome of a single-row read: the row, a miss, or a storage failure."""

    status: LookupStatus
    value: Optional[T] = None

    @classmethod
    def found(cls, value: T) -> "Lookup[T]":
        return cls(LookupStatus.FOUND, value)

    @classmethod
    def not_found(cls) -> "Lookup[T]":
        return cls(LookupStatus.NOT_FOUND)

    @classmethod
    def error(cls) -> "Lookup[T]":
        return cls(LookupStatus.ERROR)

    @property
    def is_found(self) -> bool:
        return self.status is LookupStatus.FOUND
