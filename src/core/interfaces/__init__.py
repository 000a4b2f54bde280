"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Permite invertir dependencias: el Core depende de abstracciones.
"""

from core.interfaces.transport import HTTPTransport, StreamConnection, StreamConnector

__all__ = ["HTTPTransport", "StreamConnection", "StreamConnector"]
