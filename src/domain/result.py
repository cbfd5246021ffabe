"""Tagged results for operations that report failure as a value.

Recipe reads and writes never raise on backend errors. They return ``Err``
and the caller decides what to degrade to with ``unwrap_or``::

    page = (await service.get_recipes(page=2)).unwrap_or(RecipePage.empty())
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar, Union

T = TypeVar("T")
D = TypeVar("D")


class ErrorKind(StrEnum):
    """Why an operation produced no value."""

    NOT_FOUND = "not_found"
    INVALID = "invalid"
    BACKEND = "backend"


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result carrying a value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap_or(self, default: D) -> T | D:
        return self.value


@dataclass(frozen=True, slots=True)
class Err:
    """A failed result. The cause has already been logged."""

    kind: ErrorKind
    message: str = ""

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap_or(self, default: D) -> D:
        return default


Result = Union[Ok[T], Err]
