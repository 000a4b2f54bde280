"""Modelos y entidades del dominio.

Por qué:
- Aquí viven las estructuras de datos puras (Pydantic v2, TypedDict, dataclasses).
- El dominio no conoce HTTP ni la CLI: solo el contrato de respuesta del backend.
"""
