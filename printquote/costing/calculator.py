"""
Quick quote: the standalone price calculator.

Material (one or more layers), electricity for the print hours and a flat
maintenance/wear charge, priced at a margin. Builds ordinary lines and
runs them through the same aggregator as a saved project.
"""

from typing import Iterable, Optional

from .line_items import LineKind, new_line, parse_amount
from .material_lookup import MaterialLookup, no_materials
from .multi_material import (
    PRINTER_POWER_KW,
    ColorLayer,
    electricity_cost,
    material_line_from_layers,
)
from .pricing_engine import aggregate


def quick_quote_lines(layers: Iterable[ColorLayer], print_hours, price_per_kwh,
                      maintenance_cost, lookup: MaterialLookup,
                      rated_power_kw=PRINTER_POWER_KW) -> list:
    material = material_line_from_layers(layers, lookup, line_id="material")
    energy = new_line(
        LineKind.PRINT_TIME,
        "electricity",
        description="Electricity",
        quantity=1,
        unit_price=electricity_cost(print_hours, price_per_kwh, rated_power_kw),
    )
    maintenance = new_line(
        LineKind.AMORTIZATION,
        "maintenance",
        description="Maintenance / wear",
        quantity=1,
        unit_price=parse_amount(maintenance_cost),
    )
    return [material, energy, maintenance]


def quick_quote(layers: Iterable[ColorLayer], print_hours=0, price_per_kwh=0,
                maintenance_cost=0, margin_percent=30,
                lookup: Optional[MaterialLookup] = None,
                rated_power_kw=PRINTER_POWER_KW) -> dict:
    """
    Returns: {"material_cost", "electricity_cost", "maintenance_cost",
              "weight_grams", "subtotal", "total", "profit", "lines"}
    """
    lookup = lookup or no_materials
    lines = quick_quote_lines(layers, print_hours, price_per_kwh, maintenance_cost,
                              lookup, rated_power_kw)
    material, energy, maintenance = lines
    totals = aggregate(lines, margin_percent)

    return {
        "material_cost": material.total,
        "electricity_cost": energy.total,
        "maintenance_cost": maintenance.total,
        "weight_grams": parse_amount(material.quantity),
        "subtotal": totals.subtotal,
        "total": totals.total,
        "profit": totals.profit,
        "lines": [line.to_dict() for line in lines],
    }
