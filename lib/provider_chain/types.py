"""
Outcome types for provider calls.

Every provider call returns a ProviderOutcome: either Success carrying the
value or Failure carrying a human-readable reason (and the error that caused
it, if any).
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

T = TypeVar("T")
In = TypeVar("In", contravariant=True)
Out = TypeVar("Out", covariant=True)


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful provider outcome"""

    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Failed provider outcome"""

    reason: str
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return False


ProviderOutcome = Union[Success[T], Failure]
