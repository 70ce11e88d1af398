"""A small success/failure container for multi-step lookups."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def and_then(self, step: Callable[[T], "Result[U, E]"]) -> "Result[U, E]":
        return step(self.value)

    def map(self, fn: Callable[[T], U]) -> "Ok[U]":
        return Ok(fn(self.value))


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    @property
    def is_ok(self) -> bool:
        return False

    def and_then(self, step: Callable) -> "Err[E]":
        return self

    def map(self, fn: Callable) -> "Err[E]":
        return self


Result = Union[Ok[T], Err[E]]
