"""
Material price lookup for the costing engine.

The catalog itself lives in the database (see routers/materials.py). The
engine only ever sees a synchronous `lookup(material_id) -> Material | None`
callable, built here from whatever the caller already loaded.

All prices are per kilogram. Line quantities are grams.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

logger = logging.getLogger(__name__)

GRAMS_PER_KG = 1000.0

# Default filament and resin prices, market averages in €/kg
DEFAULT_MATERIALS = {
    "PLA": 20.0,
    "ABS": 25.0,
    "PETG": 28.0,
    "TPU": 35.0,
    "Nylon": 40.0,
    "Resin": 50.0,
}


@dataclass(frozen=True)
class Material:
    id: str
    name: str
    price_per_kg: float

    @property
    def price_per_gram(self) -> float:
        return self.price_per_kg / GRAMS_PER_KG


MaterialLookup = Callable[[str], Optional[Material]]


def no_materials(material_id: str) -> Optional[Material]:
    """Lookup used when the caller has no catalog loaded."""
    return None


class MaterialCatalog:
    """
    In-memory, read-only view over a set of materials.

    Ids are compared as strings so integer primary keys from the database
    and string ids from a form both resolve.
    """

    def __init__(self, materials: Iterable[Material] = ()):
        self._by_id: Dict[str, Material] = {}
        for material in materials:
            self._by_id[str(material.id)] = material

    @classmethod
    def from_prices(cls, prices: Dict[str, float]) -> "MaterialCatalog":
        """Build a catalog keyed by name, e.g. from DEFAULT_MATERIALS."""
        return cls(Material(id=name, name=name, price_per_kg=price) for name, price in prices.items())

    @classmethod
    def from_rows(cls, rows) -> "MaterialCatalog":
        """Build a catalog from ORM rows with id / name / price_per_kg."""
        return cls(
            Material(id=str(row.id), name=row.name, price_per_kg=float(row.price_per_kg or 0.0))
            for row in rows
        )

    def lookup(self, material_id) -> Optional[Material]:
        if material_id is None:
            return None
        material = self._by_id.get(str(material_id))
        if material is None:
            logger.debug("Material %s not in catalog", material_id)
        return material

    __call__ = lookup

    def __len__(self) -> int:
        return len(self._by_id)

    def __contains__(self, material_id) -> bool:
        return str(material_id) in self._by_id

