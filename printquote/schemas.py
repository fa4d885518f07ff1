from pydantic import BaseModel
from typing import Optional, List, Union
from datetime import datetime
from .config import settings
from .costing import LineKind

# Form fields arrive as typed: numbers, numeric strings or blanks.
# The costing engine coerces them, so the schemas don't reject partial input.
Amount = Optional[Union[float, str]]


class MaterialBase(BaseModel):
    name: str
    price_per_kg: float = 0.0
    color: Optional[str] = None
    is_favorite: bool = False
    notes: Optional[str] = None


class MaterialCreate(MaterialBase):
    pass


class MaterialUpdate(BaseModel):
    name: Optional[str] = None
    price_per_kg: Optional[float] = None
    color: Optional[str] = None
    is_favorite: Optional[bool] = None
    notes: Optional[str] = None


class Material(MaterialBase):
    id: int
    created_at: datetime
    class Config:
        from_attributes = True


class LineItemIn(BaseModel):
    kind: LineKind = LineKind.OTHER
    description: str = ""
    quantity: Amount = 1
    unit_price: Amount = None
    material_id: Optional[int] = None


class ColorLayerIn(BaseModel):
    material_id: Optional[int] = None
    mass_grams: Amount = 0
    custom_unit_price: Amount = None


class ProjectBase(BaseModel):
    name: str
    print_time_hours: Amount = 0
    profit_margin: Amount = settings.DEFAULT_MARGIN_PCT
    notes: Optional[str] = None


class ProjectCreate(ProjectBase):
    line_items: List[LineItemIn] = []
    # Multicolor print: priced into one extra material line
    color_layers: List[ColorLayerIn] = []


class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    print_time_hours: Amount = None
    profit_margin: Amount = None
    notes: Optional[str] = None
    line_items: Optional[List[LineItemIn]] = None
    color_layers: Optional[List[ColorLayerIn]] = None


class QuotePreview(BaseModel):
    profit_margin: Amount = settings.DEFAULT_MARGIN_PCT
    line_items: List[LineItemIn] = []
    color_layers: List[ColorLayerIn] = []


class MoveRequest(BaseModel):
    from_index: int
    to_index: int


class MarginRequest(BaseModel):
    profit_margin: Amount


class AssetBase(BaseModel):
    name: str
    acquisition_cost: Amount = 0
    prints_per_month: Amount = 0
    avg_profit_per_print: Amount = 0
    notes: Optional[str] = None


class AssetCreate(AssetBase):
    pass


class AssetUpdate(BaseModel):
    name: Optional[str] = None
    acquisition_cost: Amount = None
    prints_per_month: Amount = None
    avg_profit_per_print: Amount = None
    notes: Optional[str] = None


class CalculatorRequest(BaseModel):
    color_layers: List[ColorLayerIn] = []
    print_time_hours: Amount = 0
    electricity_price: Amount = None
    maintenance_cost: Amount = None
    profit_margin: Amount = None
