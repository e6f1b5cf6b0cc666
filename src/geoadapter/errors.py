"""Exceptions raised by the geometry adapters."""


class GeometryAdapterError(Exception):
    """Base class for adapter errors."""


class UnsupportedGeometryError(GeometryAdapterError, TypeError):
    """Raised when a geometry has no mapping to the requested model."""

    def __init__(self, geometry, target: str):
        self.geometry_type = type(geometry).__name__
        self.target = target
        super().__init__(f"No {target} mapping for geometry type {self.geometry_type!r}")


class OrphanRingError(GeometryAdapterError, ValueError):
    """Raised in strict ring assembly when an inner ring precedes every outer ring."""

    def __init__(self, position: int):
        self.position = position
        super().__init__(f"Inner ring at position {position} has no preceding outer ring")
