"""
QuoteDraft: the line list behind one editing screen.

The quoting calculator, the project editor and the catalog product editor
all hold an ordered list of lines plus a margin and re-price after every
edit. This class is that shared state; the math stays in the engine
modules and is re-run on each read of `totals`.
"""

from typing import Iterable, List, Optional

from .line_items import (
    LineItem,
    LineKind,
    MaterialLine,
    bind_material,
    new_line,
    validate_for_save,
)
from .material_lookup import MaterialLookup, no_materials
from .multi_material import ColorLayer, material_line_from_layers
from .ordering import move_item, move_item_by_id
from .pricing_engine import PricingEngine, QuoteTotals, aggregate

EDITABLE_FIELDS = ("description", "quantity", "unit_price", "material_ref")


class QuoteDraft:

    def __init__(self, lookup: Optional[MaterialLookup] = None, margin_percent=30):
        self.lookup = lookup or no_materials
        self.margin_percent = margin_percent
        self.lines: List[LineItem] = []
        self._next_id = 1

    def _new_id(self) -> str:
        line_id = f"line-{self._next_id}"
        self._next_id += 1
        return line_id

    def _find(self, line_id: str) -> LineItem:
        for line in self.lines:
            if line.id == line_id:
                return line
        raise KeyError(f"No line with id {line_id}")

    # --- Editing ---

    def add_line(self, kind, line_id: Optional[str] = None, **fields) -> LineItem:
        """Append a line with the defaults (quantity 1, unit price 0)."""
        material_ref = fields.pop("material_ref", None)
        line = new_line(kind, line_id or self._new_id(), **fields)
        if material_ref is not None:
            if not isinstance(line, MaterialLine):
                raise ValueError(f"{line.kind.value} lines have no material reference")
            bind_material(line, material_ref, self.lookup)
            # A price or name typed alongside the material still overrides the catalog
            if "unit_price" in fields:
                line.unit_price = fields["unit_price"]
            if fields.get("description"):
                line.description = fields["description"]
        self.lines.append(line)
        return line

    def add_layers(self, layers: Iterable[ColorLayer], line_id: Optional[str] = None) -> MaterialLine:
        """Append the synthetic material line for a multicolor print."""
        line = material_line_from_layers(layers, self.lookup, line_id=line_id or self._new_id())
        self.lines.append(line)
        return line

    def update_line(self, line_id: str, field: str, value) -> LineItem:
        if field not in EDITABLE_FIELDS:
            raise ValueError(f"Field '{field}' cannot be edited")
        line = self._find(line_id)
        if field == "material_ref":
            if not isinstance(line, MaterialLine):
                raise ValueError(f"{line.kind.value} lines have no material reference")
            bind_material(line, value, self.lookup)
        else:
            setattr(line, field, value)
        return line

    def remove_line(self, line_id: str) -> None:
        line = self._find(line_id)
        self.lines.remove(line)

    def move_line(self, from_index: int, to_index: int) -> None:
        self.lines = move_item(self.lines, from_index, to_index)

    def drop_line(self, active_id: str, over_id: str) -> None:
        self.lines = move_item_by_id(self.lines, active_id, over_id)

    # --- Results ---

    @property
    def totals(self) -> QuoteTotals:
        return aggregate(self.lines, self.margin_percent)

    def lines_of_kind(self, kind) -> List[LineItem]:
        kind = LineKind(kind)
        return [line for line in self.lines if line.kind == kind]

    def priced_quote(self) -> dict:
        return PricingEngine(self.lookup).build_priced_quote(self.lines, self.margin_percent)

    def validate_for_save(self) -> None:
        validate_for_save(self.lines)
