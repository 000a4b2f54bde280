"""Resultado explícito de una petición: éxito con valor o fallo con causa.

Por qué existe:
- "Lista vacía" y "la petición falló" son cosas distintas; el `Outcome` las
  separa. `unwrap_or` es el adaptador que las vuelve a mezclar cuando se
  necesita el comportamiento clásico de tragar errores.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

V = TypeVar("V")
R = TypeVar("R")
D = TypeVar("D")


@dataclass(frozen=True)
class Outcome(Generic[V]):
    value: V | None = None
    error: BaseException | None = None

    @classmethod
    def success(cls, value: V) -> "Outcome[V]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "Outcome[V]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> V:
        """Return the value, re-raising the original cause on failure."""

        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def unwrap_or(self, default: D) -> V | D:
        if self.error is not None:
            return default
        return self.value  # type: ignore[return-value]

    def map(self, fn: Callable[[V], R]) -> "Outcome[R]":
        """Apply `fn` to a successful value; failures pass through untouched.

        Exceptions raised by `fn` are not captured.
        """

        if self.error is not None:
            return Outcome(error=self.error)
        return Outcome(value=fn(self.value))  # type: ignore[arg-type]
