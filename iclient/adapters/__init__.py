"""
Geometry adapters, one per host framework.

    from iclient.adapters import ShapelyAdapter
    service = QueryService(url, adapter=ShapelyAdapter())
"""

from .base import GeometryAdapter
from .plain import PlainAdapter
from .shapely_adapter import ShapelyAdapter

ADAPTERS = {
    PlainAdapter.name: PlainAdapter,
    ShapelyAdapter.name: ShapelyAdapter,
}


def get_adapter(name: str) -> GeometryAdapter:
    """Adapter instance by name ("plain", "shapely")."""
    try:
        return ADAPTERS[name]()
    except KeyError:
        raise ValueError(f"Unknown geometry adapter: {name}. Available: {sorted(ADAPTERS)}")

__all__ = ["GeometryAdapter", "PlainAdapter", "ShapelyAdapter", "get_adapter"]
