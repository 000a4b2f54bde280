"""Servicios del Core: el cliente de recursos y sus piezas."""

from core.services.endpoint import ResourceEndpoint
from core.services.parameters import ParameterAccumulator, RequestConfig
from core.services.resource_client import ResourceClient
from core.services.stream import StreamChannel

__all__ = [
    "ParameterAccumulator",
    "RequestConfig",
    "ResourceClient",
    "ResourceEndpoint",
    "StreamChannel",
]
