from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base


class Material(Base):
    """Filament / resin catalog. Prices per kilogram."""
    __tablename__ = "materials"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    price_per_kg = Column(Float, nullable=False, default=0.0)
    color = Column(String, nullable=True)
    is_favorite = Column(Boolean, default=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class Project(Base):
    """A priced print job. Totals are the costing engine's output at save time."""
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    print_time_hours = Column(Float, default=0.0)
    profit_margin = Column(Float, default=30.0)
    notes = Column(Text, nullable=True)
    # Roll-ups
    weight_grams = Column(Float, default=0.0)
    material_cost = Column(Float, default=0.0)
    labor_cost = Column(Float, default=0.0)
    amortization_cost = Column(Float, default=0.0)
    subtotal = Column(Float, default=0.0)
    total_price = Column(Float, default=0.0)
    profit = Column(Float, default=0.0)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    line_items = relationship(
        "ProjectLineItem",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectLineItem.position",
    )


class ProjectLineItem(Base):
    __tablename__ = "project_line_items"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    # DECISION: kind is a VARCHAR validated against costing.LineKind, not a DB enum
    kind = Column(String, nullable=False, default="other")
    description = Column(String, default="")
    # Line totals are recomputed from these, never stored
    quantity = Column(Float, default=1.0)
    unit_price = Column(Float, default=0.0)
    # €/kg typed on a multicolor layer; the row is priced even without a material
    custom_unit_price = Column(Float, nullable=True)
    material_id = Column(Integer, ForeignKey("materials.id", ondelete="SET NULL"), nullable=True)

    project = relationship("Project", back_populates="line_items")


class AmortizationAsset(Base):
    """Printers and other equipment whose purchase is recovered from per-print profit."""
    __tablename__ = "amortization_assets"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    acquisition_cost = Column(Float, default=0.0)
    prints_per_month = Column(Float, default=0.0)
    avg_profit_per_print = Column(Float, default=0.0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
