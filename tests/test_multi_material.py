"""
Multi-material cost tests.

Tests:
1-5.  Layer cost: custom price, catalog price, unknown material, no layers
6-9.  Synthetic material line: single layer, multicolor, unpriced layers
10.   Electricity cost
"""

import pytest

from printquote.costing import ColorLayer, aggregate, aggregate_material_cost, electricity_cost
from printquote.costing.line_items import is_unpriced
from printquote.costing.material_lookup import no_materials
from printquote.costing.multi_material import effective_price, material_line_from_layers


# ============================================================
# 1-5. Layer cost
# ============================================================

def test_custom_price_layers():
    """Two 50 g layers at a custom 0.02 €/kg → 0.002."""
    layers = [
        ColorLayer(id="a", mass_grams=50, custom_unit_price=0.02),
        ColorLayer(id="b", mass_grams=50, custom_unit_price=0.02),
    ]
    assert aggregate_material_cost(layers, no_materials) == pytest.approx(0.002)


def test_catalog_priced_layers(catalog):
    layers = [
        ColorLayer(id="a", material_ref="pla", mass_grams=200),
        ColorLayer(id="b", material_ref="tpu", mass_grams="40"),
    ]
    assert aggregate_material_cost(layers, catalog) == pytest.approx(0.2 * 20 + 0.04 * 35)


def test_custom_price_overrides_catalog(catalog):
    layer = ColorLayer(id="a", material_ref="pla", mass_grams=1000, custom_unit_price="15")
    assert effective_price(layer, catalog) == 15.0
    assert aggregate_material_cost([layer], catalog) == pytest.approx(15.0)

    blank = ColorLayer(id="b", material_ref="pla", mass_grams=1000, custom_unit_price="")
    assert effective_price(blank, catalog) == 20.0


def test_unknown_material_layer_adds_nothing(catalog):
    layers = [
        ColorLayer(id="a", material_ref="pla", mass_grams=100),
        ColorLayer(id="b", material_ref="unobtainium", mass_grams=100),
        ColorLayer(id="c", mass_grams=100),
    ]
    assert effective_price(layers[1], catalog) is None
    assert effective_price(layers[2], catalog) is None
    assert aggregate_material_cost(layers, catalog) == pytest.approx(2.0)


def test_no_layers_costs_zero(catalog):
    assert aggregate_material_cost([], catalog) == 0.0


# ============================================================
# 6-9. Synthetic material line
# ============================================================

def test_single_layer_line_keeps_material(catalog):
    line = material_line_from_layers([ColorLayer(id="a", material_ref="petg", mass_grams=250)], catalog)
    assert line.material_ref == "petg"
    assert line.description == "PETG"
    assert line.quantity == pytest.approx(250.0)
    assert line.total == pytest.approx(7.0)


def test_multicolor_line_totals_match_layer_cost(catalog):
    layers = [
        ColorLayer(id="a", material_ref="pla", mass_grams=150),
        ColorLayer(id="b", material_ref="tpu", mass_grams=50),
    ]
    line = material_line_from_layers(layers, catalog, line_id="multi")
    assert line.id == "multi"
    assert line.material_ref is None
    assert line.description == "Multicolor: PLA + TPU"
    assert line.quantity == pytest.approx(200.0)
    assert line.total == pytest.approx(aggregate_material_cost(layers, catalog))
    assert not is_unpriced(line, catalog)

    data = line.to_dict()
    assert [layer["id"] for layer in data["layers"]] == ["a", "b"]


def test_multicolor_line_flags_unpriced_layer(catalog):
    layers = [
        ColorLayer(id="a", material_ref="pla", mass_grams=100),
        ColorLayer(id="b", material_ref="unobtainium", mass_grams=100),
    ]
    line = material_line_from_layers(layers, catalog)
    assert is_unpriced(line, catalog)
    assert line.total == pytest.approx(2.0)


def test_multicolor_line_feeds_the_aggregator(catalog):
    layers = [
        ColorLayer(id="a", material_ref="pla", mass_grams=50),
        ColorLayer(id="b", material_ref="petg", mass_grams=50),
    ]
    line = material_line_from_layers(layers, catalog)
    totals = aggregate([line], 30)
    assert totals.subtotal == pytest.approx(1.0 + 1.4)
    assert totals.total == pytest.approx(2.4 * 1.3)


def test_empty_layers_line_is_zero(catalog):
    line = material_line_from_layers([], catalog)
    assert line.quantity == 0.0
    assert line.total == 0.0


# ============================================================
# 10. Electricity
# ============================================================

def test_electricity_cost():
    # 5 h × 0.2 kW × 0.15 €/kWh
    assert electricity_cost(5, 0.15) == pytest.approx(0.15)
    assert electricity_cost("10", "0.30", rated_power_kw=0.35) == pytest.approx(1.05)
    assert electricity_cost("", 0.15) == 0.0
