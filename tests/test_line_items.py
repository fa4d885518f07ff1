"""
Line-item model tests.

Tests:
1-4.   parse_amount coercion: numbers, strings, junk, negatives
5-8.   Line totals: recomputed, never stored, clamped
9-11.  Tagged variant: only material lines carry a material reference
12-15. Material binding: catalog auto-fill, manual override, unknown material
16-18. Save validation: empty list, no material line, valid list
"""

import math

import pytest

from printquote.costing import (
    LineItem,
    LineKind,
    MaterialLine,
    QuoteValidationError,
    bind_material,
    new_line,
    parse_amount,
    validate_for_save,
)
from printquote.costing.line_items import is_unpriced, unpriced_line_ids


# ============================================================
# 1-4. Coercion
# ============================================================

def test_parse_amount_numbers_and_numeric_strings():
    assert parse_amount(12) == 12.0
    assert parse_amount(0.5) == 0.5
    assert parse_amount("100") == 100.0
    assert parse_amount(" 2.75 ") == 2.75
    assert parse_amount("1,5") == 1.5


def test_parse_amount_junk_is_zero():
    """Half-typed form fields never raise."""
    for value in (None, "", "   ", "abc", "1.2.3", [], {}, True, float("nan"), float("inf")):
        assert parse_amount(value) == 0.0, value


def test_parse_amount_negative_clamped_by_default():
    assert parse_amount(-5) == 0.0
    assert parse_amount("-5") == 0.0


def test_parse_amount_negative_allowed_for_margins():
    assert parse_amount(-15, allow_negative=True) == -15.0
    assert parse_amount("-15", allow_negative=True) == -15.0
    assert parse_amount("oops", allow_negative=True) == 0.0


# ============================================================
# 5-8. Totals
# ============================================================

def test_new_line_defaults():
    """'Add line' creates quantity 1, unit price 0, total 0."""
    line = new_line(LineKind.LABOR, "line-1")
    assert line.quantity == 1
    assert line.unit_price == 0
    assert line.description == ""
    assert line.total == 0.0


def test_total_is_quantity_times_unit_price():
    line = new_line(LineKind.PACKAGING, "line-1", quantity="3", unit_price=1.25)
    assert line.total == pytest.approx(3.75)


def test_total_follows_every_edit():
    line = new_line(LineKind.LABOR, "line-1", quantity=2, unit_price=10)
    assert line.total == 20.0
    line.quantity = 3
    assert line.total == 30.0
    line.unit_price = ""
    assert line.total == 0.0


def test_total_cannot_be_assigned():
    line = new_line(LineKind.OTHER, "line-1")
    with pytest.raises(AttributeError):
        line.total = 99


def test_total_clamps_negative_and_nan():
    line = new_line(LineKind.OTHER, "line-1", quantity=-2, unit_price=10)
    assert line.total == 0.0
    line.quantity = "nan"
    assert not math.isnan(line.total)
    assert line.total == 0.0


# ============================================================
# 9-11. Tagged variant
# ============================================================

def test_material_kind_builds_material_line():
    line = new_line("material", "line-1")
    assert isinstance(line, MaterialLine)
    assert line.kind == LineKind.MATERIAL
    assert line.material_ref is None


def test_other_kinds_have_no_material_reference():
    for kind in (LineKind.LABOR, LineKind.PACKAGING, LineKind.AMORTIZATION,
                 LineKind.PRINT_TIME, LineKind.OTHER):
        line = new_line(kind, "line-1")
        assert not isinstance(line, MaterialLine)
        assert not hasattr(line, "material_ref")

    with pytest.raises(ValueError):
        new_line(LineKind.LABOR, "line-1", material_ref="pla")


def test_plain_line_item_rejects_material_kind():
    with pytest.raises(ValueError):
        LineItem(id="line-1", kind=LineKind.MATERIAL)
    with pytest.raises(ValueError):
        MaterialLine(id="line-1", kind=LineKind.LABOR)


# ============================================================
# 12-15. Material binding
# ============================================================

def test_bind_material_fills_price_per_gram_and_name(catalog):
    line = new_line(LineKind.MATERIAL, "line-1", quantity=100)
    assert bind_material(line, "pla", catalog) is True
    assert line.unit_price == pytest.approx(0.02)
    assert line.description == "PLA"
    assert line.total == pytest.approx(2.0)
    assert not is_unpriced(line, catalog)


def test_manual_price_overrides_catalog(catalog):
    line = new_line(LineKind.MATERIAL, "line-1", quantity=100)
    bind_material(line, "petg", catalog)
    line.unit_price = "0.05"
    assert line.total == pytest.approx(5.0)
    assert line.material_ref == "petg"


def test_rebinding_switches_material(catalog):
    line = new_line(LineKind.MATERIAL, "line-1", quantity=1000)
    bind_material(line, "pla", catalog)
    bind_material(line, "tpu", catalog)
    assert line.description == "TPU"
    assert line.total == pytest.approx(35.0)


def test_unknown_material_leaves_line_unpriced(catalog):
    """Missing material is reported, never raised."""
    line = new_line(LineKind.MATERIAL, "line-1", quantity=100, unit_price=0)
    assert bind_material(line, "unobtainium", catalog) is False
    assert line.material_ref == "unobtainium"
    assert line.total == 0.0
    assert is_unpriced(line, catalog)

    empty = new_line(LineKind.MATERIAL, "line-2")
    labor = new_line(LineKind.LABOR, "line-3")
    assert unpriced_line_ids([line, empty, labor], catalog) == ["line-1", "line-2"]


# ============================================================
# 16-18. Save validation
# ============================================================

def test_validate_rejects_empty_list():
    with pytest.raises(QuoteValidationError):
        validate_for_save([])


def test_validate_requires_material_line():
    lines = [new_line(LineKind.LABOR, "line-1", unit_price=15)]
    with pytest.raises(QuoteValidationError, match="material"):
        validate_for_save(lines)


def test_validate_accepts_material_line():
    lines = [new_line(LineKind.MATERIAL, "line-1"), new_line(LineKind.LABOR, "line-2")]
    validate_for_save(lines)
