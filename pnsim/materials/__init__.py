from __future__ import annotations
from .database import PhysicalConstants, get_material, list_materials, with_overrides

__all__ = ["PhysicalConstants", "get_material", "list_materials", "with_overrides"]
