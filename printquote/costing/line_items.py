"""
Line-item model: one priced row of a quote.

A line keeps the raw values the user typed (numbers, numeric strings,
empty strings while the field is being edited). Its total is never stored:
it is recomputed from quantity × unit price every time it is read, with
anything non-numeric or negative counted as zero.

Only material lines carry a material reference; they are MaterialLine
instances. Every other kind is a plain LineItem.
"""

import enum
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

from .material_lookup import MaterialLookup

logger = logging.getLogger(__name__)


class LineKind(str, enum.Enum):
    MATERIAL = "material"
    LABOR = "labor"
    PACKAGING = "packaging"
    AMORTIZATION = "amortization"
    PRINT_TIME = "print_time"
    OTHER = "other"


LINE_KIND_LABELS = {
    LineKind.MATERIAL: "Material",
    LineKind.LABOR: "Labor",
    LineKind.PACKAGING: "Packaging",
    LineKind.AMORTIZATION: "Amortization",
    LineKind.PRINT_TIME: "Print hours",
    LineKind.OTHER: "Other",
}


class QuoteValidationError(ValueError):
    """A quote is not in a state that can be saved."""


def parse_amount(value: Any, allow_negative: bool = False) -> float:
    """
    Parse a user-entered amount. Never raises.

    None, blank, non-numeric, NaN and infinite values all come back as 0.0,
    so half-typed form fields never break a recalculation. Negative values
    are also 0.0 unless allow_negative is set (margins may go negative).
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip().replace(",", ".")
        if not value:
            return 0.0
    try:
        number = float(value)
    except (ValueError, TypeError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    if number < 0 and not allow_negative:
        return 0.0
    return number


@dataclass
class LineItem:
    id: str
    kind: LineKind = LineKind.OTHER
    description: str = ""
    quantity: Any = 1
    unit_price: Any = 0

    def __post_init__(self):
        self.kind = LineKind(self.kind)
        if self.kind == LineKind.MATERIAL and not isinstance(self, MaterialLine):
            raise ValueError("material lines must be created as MaterialLine")

    @property
    def total(self) -> float:
        return parse_amount(self.quantity) * parse_amount(self.unit_price)

    @property
    def label(self) -> str:
        return LINE_KIND_LABELS[self.kind]

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "description": self.description,
            "quantity": parse_amount(self.quantity),
            "unit_price": parse_amount(self.unit_price),
            "total": self.total,
        }


@dataclass
class MaterialLine(LineItem):
    kind: LineKind = field(default=LineKind.MATERIAL)
    material_ref: Optional[str] = None
    # Set on the synthetic line built from multicolor layers
    layers: tuple = ()

    def __post_init__(self):
        super().__post_init__()
        if self.kind != LineKind.MATERIAL:
            raise ValueError(f"MaterialLine cannot have kind {self.kind.value}")

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["material_ref"] = self.material_ref
        if self.layers:
            data["layers"] = [layer.to_dict() for layer in self.layers]
        return data


def new_line(kind, line_id: str, **fields) -> LineItem:
    """Create a line with the 'add line' defaults: quantity 1, unit price 0."""
    kind = LineKind(kind)
    if kind == LineKind.MATERIAL:
        return MaterialLine(id=line_id, **fields)
    if "material_ref" in fields:
        if fields["material_ref"] is not None:
            raise ValueError(f"{kind.value} lines have no material reference")
        fields = {k: v for k, v in fields.items() if k != "material_ref"}
    return LineItem(id=line_id, kind=kind, **fields)


def bind_material(line: MaterialLine, material_ref, lookup: MaterialLookup) -> bool:
    """
    Point a material line at a catalog material.

    On a hit the unit price becomes the catalog price per gram and the
    description becomes the material name; a later manual unit_price edit
    still wins. On a miss the reference is kept but the line stays
    unpriced. Returns whether the material was found.
    """
    line.material_ref = None if material_ref in (None, "") else str(material_ref)
    if line.material_ref is None:
        return False

    material = lookup(line.material_ref)
    if material is None:
        logger.debug("Line %s references unknown material %s, left unpriced", line.id, line.material_ref)
        return False

    line.unit_price = material.price_per_gram
    line.description = material.name
    return True


def is_unpriced(line: LineItem, lookup: MaterialLookup) -> bool:
    """A material line with no material chosen, or one the catalog doesn't know."""
    if not isinstance(line, MaterialLine):
        return False
    if line.layers:
        return any(layer.price_per_kg(lookup) is None for layer in line.layers)
    if line.material_ref is None:
        return True
    return lookup(line.material_ref) is None


def unpriced_line_ids(lines: Iterable[LineItem], lookup: MaterialLookup) -> List[str]:
    return [line.id for line in lines if is_unpriced(line, lookup)]


def validate_for_save(lines: Iterable[LineItem]) -> None:
    """
    Check a line list before it is persisted.

    Quotes price physical objects, so at least one material line is required.
    The aggregators never call this; they compute over anything.
    """
    lines = list(lines)
    if not lines:
        raise QuoteValidationError("Add at least one line before saving")
    if not any(line.kind == LineKind.MATERIAL for line in lines):
        raise QuoteValidationError("At least one material line is required before saving")
