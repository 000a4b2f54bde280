"""Modelos del dominio.

Por qué dos estilos:
- `PaginatedResult` es un `TypedDict`: el cliente solo reenvía lo que decodifica
  el transporte, nunca valida la forma de los recursos.
- Los metadatos de OPTIONS sí se modelan con Pydantic v2: son la única
  respuesta que el cliente interpreta (proyección `actions.POST[...]`).
"""

from __future__ import annotations

from typing import Any, Generic, TypedDict, TypeVar

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from core.errors import SchemaFieldNotFoundError

T = TypeVar("T")


class PaginatedResult(TypedDict, Generic[T]):
    """Sobre de paginación estilo DRF (`count/next/previous/results`)."""

    count: int
    next: str | None
    previous: str | None
    results: list[T]


class SchemaChoice(BaseModel):
    model_config = ConfigDict(extra="allow")

    value: Any = Field(..., description="Valor legal que acepta el backend.")
    display_name: str | None = Field(
        default=None,
        description="Etiqueta legible del valor.",
    )


class SchemaField(BaseModel):
    """Metadatos de un campo escribible (una entrada de `actions.POST`)."""

    model_config = ConfigDict(extra="allow")

    type: str | None = None
    required: bool = False
    read_only: bool = False
    label: str | None = None
    help_text: str | None = None
    max_length: int | None = None
    choices: list[SchemaChoice] | None = Field(
        default=None,
        description="Valores enumerados; ausente si el campo no es de tipo choice.",
    )


class SchemaActions(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    post: dict[str, SchemaField] | None = Field(default=None, alias="POST")
    put: dict[str, SchemaField] | None = Field(default=None, alias="PUT")


class SchemaMetadata(BaseModel):
    """Respuesta de una petición OPTIONS (introspección de esquema).

    Todo es opcional: un endpoint de solo lectura no publica `actions`, y la
    ausencia se reporta como `SchemaFieldNotFoundError` al proyectar.
    """

    model_config = ConfigDict(extra="allow")

    name: str | None = None
    description: str | None = None
    renders: list[str] = Field(default_factory=list)
    parses: list[str] = Field(default_factory=list)
    actions: SchemaActions | None = None

    def post_fields(self) -> dict[str, SchemaField]:
        if self.actions is None:
            raise SchemaFieldNotFoundError("actions")
        if self.actions.post is None:
            raise SchemaFieldNotFoundError("actions.POST")
        return self.actions.post

    def field(self, name: str) -> SchemaField:
        fields = self.post_fields()
        if name not in fields:
            raise SchemaFieldNotFoundError(f"actions.POST.{name}", field=name)
        return fields[name]

    def choices_for(self, name: str) -> list[SchemaChoice]:
        choices = self.field(name).choices
        if choices is None:
            raise SchemaFieldNotFoundError(f"actions.POST.{name}.choices", field=name)
        return choices
