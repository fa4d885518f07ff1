from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from .. import schemas
from ..config import settings
from ..costing import ColorLayer
from ..costing.calculator import quick_quote
from ..database import get_db
from .materials import load_catalog

router = APIRouter(prefix="/calculator", tags=["calculator"])


@router.post("/quote")
def calculate_quote(request: schemas.CalculatorRequest, db: Session = Depends(get_db)):
    """
    Quick price for a single print: material, electricity, maintenance, margin.
    Blank electricity / maintenance / margin fields fall back to the shop defaults.
    """
    layers = [
        ColorLayer(
            id=f"layer-{i}",
            material_ref=None if layer.material_id is None else str(layer.material_id),
            mass_grams=layer.mass_grams,
            custom_unit_price=layer.custom_unit_price,
        )
        for i, layer in enumerate(request.color_layers, start=1)
    ]

    def _or_default(value, default):
        return default if value is None or value == "" else value

    return quick_quote(
        layers,
        print_hours=request.print_time_hours,
        price_per_kwh=_or_default(request.electricity_price, settings.ELECTRICITY_PRICE_DEFAULT),
        maintenance_cost=_or_default(request.maintenance_cost, settings.MAINTENANCE_COST_DEFAULT),
        margin_percent=_or_default(request.profit_margin, settings.DEFAULT_MARGIN_PCT),
        lookup=load_catalog(db),
        rated_power_kw=settings.PRINTER_POWER_KW,
    )
