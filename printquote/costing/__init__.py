"""
Cost & pricing engine.

Pure Python math, no I/O. Takes line items, color layers and equipment
figures as typed by the user and returns totals. Persistence and HTTP live
in the routers; this package only computes.
"""

from .amortization import AmortizationAsset, AmortizationResult, BreakEven, amortize
from .line_items import (
    LineItem,
    LineKind,
    MaterialLine,
    QuoteValidationError,
    bind_material,
    new_line,
    parse_amount,
    validate_for_save,
)
from .material_lookup import Material, MaterialCatalog
from .multi_material import ColorLayer, aggregate_material_cost, electricity_cost
from .ordering import move_item
from .pricing_engine import QuoteTotals, aggregate
