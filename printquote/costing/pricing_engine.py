"""
Quote aggregator.

Sums line totals, applies the profit margin, and derives subtotal / total /
profit. Pure math: same lines and margin in, same numbers out. Called after
every edit, so it stays O(n) and never rounds. Rounding is a display
concern.

    subtotal = Σ line.total            (every kind)
    total    = subtotal × (1 + margin / 100)
    profit   = total − subtotal
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from .line_items import (
    LineItem,
    LineKind,
    MaterialLine,
    is_unpriced,
    parse_amount,
    unpriced_line_ids,
)
from .material_lookup import MaterialLookup, no_materials

# Margins offered side by side in the editor
MARGIN_OPTIONS = [0, 10, 20, 30, 40, 50]


@dataclass(frozen=True)
class QuoteTotals:
    subtotal: float
    total: float
    profit: float

    def to_dict(self) -> dict:
        return {"subtotal": self.subtotal, "total": self.total, "profit": self.profit}


def apply_margin(subtotal: float, margin_percent) -> QuoteTotals:
    # Negative margins are accepted (loss-leader pricing), only junk becomes 0
    margin = parse_amount(margin_percent, allow_negative=True)
    total = subtotal * (1 + margin / 100.0)
    return QuoteTotals(subtotal=subtotal, total=total, profit=total - subtotal)


def aggregate(lines: Iterable[LineItem], margin_percent) -> QuoteTotals:
    """Price a list of lines at the given margin. An empty list prices at zero."""
    subtotal = sum((line.total for line in lines), 0.0)
    return apply_margin(subtotal, margin_percent)


def margin_options(subtotal: float, options=MARGIN_OPTIONS) -> Dict[str, float]:
    """
    Returns: {"0": subtotal, "10": subtotal*1.10, ..., "50": subtotal*1.50}
    """
    return {str(pct): apply_margin(subtotal, pct).total for pct in options}


def kind_subtotals(lines: Iterable[LineItem]) -> Dict[str, float]:
    """Subtotal per line kind. Every kind is present, empty ones at 0."""
    subtotals = {kind.value: 0.0 for kind in LineKind}
    for line in lines:
        subtotals[line.kind.value] += line.total
    return subtotals


class PricingEngine:
    """
    Builds the full priced-quote breakdown stored with a project.

    Wraps aggregate() with the roll-ups the project record keeps
    (material / labor / amortization cost, printed weight) and the list of
    material lines that could not be priced.
    """

    def __init__(self, lookup: Optional[MaterialLookup] = None):
        self.lookup = lookup or no_materials

    def build_priced_quote(self, lines, margin_percent) -> dict:
        lines = list(lines)
        totals = aggregate(lines, margin_percent)
        per_kind = kind_subtotals(lines)

        return {
            "lines": [line.to_dict() for line in lines],
            "subtotal": totals.subtotal,
            "total": totals.total,
            "profit": totals.profit,
            "margin_percent": parse_amount(margin_percent, allow_negative=True),
            "kind_subtotals": per_kind,
            "material_cost": self._calculate_material_cost(lines),
            "labor_cost": per_kind[LineKind.LABOR.value],
            "amortization_cost": per_kind[LineKind.AMORTIZATION.value],
            "weight_grams": self._calculate_weight(lines),
            "unpriced_line_ids": unpriced_line_ids(lines, self.lookup),
            "margin_options": margin_options(totals.subtotal),
        }

    def _calculate_material_cost(self, lines) -> float:
        """Sum of material line totals, including manually priced ones."""
        return sum((line.total for line in lines if line.kind == LineKind.MATERIAL), 0.0)

    def _calculate_weight(self, lines) -> float:
        """Grams printed: quantities of priced material lines, or of the priced layers of a multicolor line."""
        weight = 0.0
        for line in lines:
            if not isinstance(line, MaterialLine):
                continue
            if line.layers:
                weight += sum(
                    (layer.mass for layer in line.layers if layer.price_per_kg(self.lookup) is not None),
                    0.0,
                )
            elif not is_unpriced(line, self.lookup):
                weight += parse_amount(line.quantity)
        return weight

    def recalculate_with_margin(self, priced_quote: dict, margin_percent) -> dict:
        """
        Re-derive total and profit from the stored subtotal at a new margin.
        Returns the updated priced_quote dict.
        """
        totals = apply_margin(priced_quote.get("subtotal", 0.0), margin_percent)
        priced_quote["margin_percent"] = parse_amount(margin_percent, allow_negative=True)
        priced_quote["total"] = totals.total
        priced_quote["profit"] = totals.profit
        return priced_quote
