"""Result of a single poll: either a final value or "not yet"."""

from dataclasses import dataclass
from typing import Final, Generic, TypeAlias, TypeVar, Union

T = TypeVar("T")


class _Pending:
    """Singleton type for the PENDING marker."""

    _instance: "_Pending | None" = None

    def __new__(cls) -> "_Pending":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "PENDING"

    def __bool__(self) -> bool:
        return False


PENDING: Final = _Pending()


@dataclass(frozen=True, slots=True)
class Ready(Generic[T]):
    """A completed poll carrying the operation's value."""

    value: T


Poll: TypeAlias = Union[Ready[T], _Pending]


def is_ready(result: Poll[T]) -> bool:
    """Returns True if ``result`` is a Ready value."""
    return isinstance(result, Ready)
