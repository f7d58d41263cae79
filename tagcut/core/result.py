"""Result type for explicit error handling.

Every service in tagcut returns ``Result[T, E]`` instead of raising, so a
failed git command or a rejected version string travels back to the CLI as
a plain value:

    match parse_version("0.2.0"):
        case Ok(version):
            print(version.to_tag())
        case Err(error):
            print(error.pretty())
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Ok[T]:
    value: T

    def map[U](self, f: Callable[[T], U]) -> Ok[U]:
        return Ok(f(self.value))


@dataclass(frozen=True, slots=True)
class Err[E]:
    error: E

    def map[U](self, f: Callable[..., U]) -> Err[E]:
        """Errors pass through ``map`` untouched."""
        return self


type Result[T, E] = Ok[T] | Err[E]
