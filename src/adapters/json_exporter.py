"""Exportación JSON de respuestas del backend.

Por qué JSON:
- Interoperabilidad con otras herramientas y pipelines (`jq`, scripts).
- Permite guardar la respuesta cruda tal como la decodificó el transporte.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel


def export_payload_json(*, payload: Any, output_path: Path) -> Path:
    """Exporta `payload` a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True, default=str) + "\n",
        encoding="utf-8",
    )
    return output_path
