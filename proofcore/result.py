"""Success or failure values.

``Settings.from_env`` returns ``Err`` for a bad environment and the macro
synthesizers return ``Err(Fault)`` when no chain of elementary steps exists.
Callers take them apart with ``match``.
"""

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E


Result: TypeAlias = Ok[T] | Err[E]
