"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Los clientes de recursos leen `base_url` / `socket_url` de un único sitio,
  igual que un `environment` de frontend.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Literal

from dotenv import dotenv_values, set_key
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

APP_NAME = "resource-client"

_ENV_HEADER = f"# {APP_NAME} user config (.env)\n"


def get_user_config_dir() -> Path:
    """Carpeta de config por usuario: XDG en Linux, APPDATA en Windows, Application Support en macOS."""

    if sys.platform.startswith("win"):
        root = Path(os.environ.get("APPDATA") or Path.home())
    elif sys.platform == "darwin":
        root = Path.home() / "Library" / "Application Support"
    else:
        root = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
    return root / APP_NAME


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def read_user_env_vars(env_path: Path | None = None) -> dict[str, str]:
    """Variables guardadas en el .env de usuario (las claves sin valor se ignoran)."""

    env_path = env_path or get_user_env_file()
    if not env_path.is_file():
        return {}
    return {key: value for key, value in dotenv_values(env_path, encoding="utf-8").items() if value is not None}


def write_user_env_vars(values: dict[str, str | None], env_path: Path | None = None) -> Path:
    """Actualiza en sitio las claves dadas del .env de usuario; las nuevas van al final.

    Un valor `None` deja la clave como está.
    """

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)
    if not env_path.exists():
        env_path.write_text(_ENV_HEADER, encoding="utf-8")

    for key, value in values.items():
        if value is None:
            continue
        # KEY=valor, sin comillas.
        set_key(env_path, key, value, quote_mode="never", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Configuración central de la aplicación.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="RESOURCE_CLIENT_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    base_url: str = Field(
        default="http://localhost:8000/api/",
        min_length=1,
        description="URL base del backend REST; se concatena tal cual con el path del recurso.",
    )
    socket_url: str = Field(
        default="ws://localhost:8000/ws",
        min_length=1,
        description="URL base para canales websocket (sin barra final).",
    )

    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default="resource-client/0.1",
        min_length=1,
        description="User-Agent para las peticiones al backend.",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Nivel de logging por defecto de la CLI.",
    )
