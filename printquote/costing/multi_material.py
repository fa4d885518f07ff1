"""
Material cost across color layers, plus the print electricity helper.

A multicolor print uses several materials at once; each layer contributes
its own mass at its own price. A single-material print is simply one layer.

    cost = Σ (mass_grams / 1000) × price_per_kg

The result is fed to the quote aggregator as one synthetic material line,
so multicolor and single-material quotes share the same total/margin math.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .line_items import MaterialLine, parse_amount
from .material_lookup import GRAMS_PER_KG, MaterialLookup

logger = logging.getLogger(__name__)

# Typical draw of an FDM printer while printing, kW
PRINTER_POWER_KW = 0.2


@dataclass(frozen=True)
class ColorLayer:
    id: str
    material_ref: Optional[str] = None
    mass_grams: Any = 0
    # €/kg, overrides the catalog price when set
    custom_unit_price: Any = None

    def price_per_kg(self, lookup: MaterialLookup) -> Optional[float]:
        return effective_price(self, lookup)

    @property
    def mass(self) -> float:
        return parse_amount(self.mass_grams)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "material_ref": self.material_ref,
            "mass_grams": self.mass,
            "custom_unit_price": self.custom_unit_price,
        }


def has_custom_price(layer: ColorLayer) -> bool:
    value = layer.custom_unit_price
    if value is None or isinstance(value, bool):
        return False
    try:
        number = float(str(value).strip().replace(",", "."))
    except ValueError:
        return False
    return math.isfinite(number)


def effective_price(layer: ColorLayer, lookup: MaterialLookup) -> Optional[float]:
    """
    Price per kg for a layer: the custom price if one was typed, else the
    catalog price. None when neither is available (layer is unpriced).
    """
    if has_custom_price(layer):
        return parse_amount(layer.custom_unit_price)
    if layer.material_ref is None:
        return None
    material = lookup(layer.material_ref)
    if material is None:
        logger.debug("Layer %s references unknown material %s", layer.id, layer.material_ref)
        return None
    return material.price_per_kg


def aggregate_material_cost(layers: Iterable[ColorLayer], lookup: MaterialLookup) -> float:
    """Mass-weighted material cost. Unpriced layers add nothing; no layers cost 0."""
    cost = 0.0
    for layer in layers:
        price = effective_price(layer, lookup)
        if price is None:
            continue
        cost += (layer.mass / GRAMS_PER_KG) * price
    return cost


def material_line_from_layers(layers: Iterable[ColorLayer], lookup: MaterialLookup,
                              line_id: str = "material") -> MaterialLine:
    """
    Build the material line that carries the layer cost into a quote.

    Quantity is the total printed mass in grams and unit price the blended
    price per gram, so the line total equals the layer cost and the weight
    roll-up keeps working.
    """
    layers = tuple(layers)
    total_mass = sum((layer.mass for layer in layers), 0.0)
    cost = aggregate_material_cost(layers, lookup)
    unit_price = cost / total_mass if total_mass > 0 else 0.0

    names = []
    for layer in layers:
        material = lookup(layer.material_ref) if layer.material_ref is not None else None
        names.append(material.name if material else (layer.material_ref or layer.id))

    if len(layers) == 1:
        description = names[0]
        material_ref = layers[0].material_ref
    else:
        description = "Multicolor: " + " + ".join(names) if names else "Multicolor"
        material_ref = None

    return MaterialLine(
        id=line_id,
        description=description,
        quantity=total_mass,
        unit_price=unit_price,
        material_ref=material_ref,
        layers=layers,
    )


def electricity_cost(print_hours, price_per_kwh, rated_power_kw=PRINTER_POWER_KW) -> float:
    """Energy used by a print: hours × kW × €/kWh."""
    return parse_amount(print_hours) * parse_amount(rated_power_kw) * parse_amount(price_per_kwh)
