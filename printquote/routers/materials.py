from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from .. import models, schemas
from ..costing import MaterialCatalog
from ..costing.material_lookup import DEFAULT_MATERIALS
from ..database import get_db

router = APIRouter(prefix="/materials", tags=["materials"])


def load_catalog(db: Session) -> MaterialCatalog:
    """Snapshot of the material table for the costing engine (synchronous lookups only)."""
    return MaterialCatalog.from_rows(db.query(models.Material).all())


def seed_default_materials(db: Session) -> int:
    seeded = 0
    for name, price_per_kg in DEFAULT_MATERIALS.items():
        existing = db.query(models.Material).filter(models.Material.name == name).first()
        if not existing:
            db.add(models.Material(name=name, price_per_kg=price_per_kg, notes="Market average"))
            seeded += 1
    db.commit()
    return seeded


@router.get("/seed")
def seed_materials(db: Session = Depends(get_db)):
    """Seed default materials. Safe to run multiple times, skips existing."""
    return {"ok": True, "seeded": seed_default_materials(db)}


@router.post("/", response_model=schemas.Material)
def create_material(material: schemas.MaterialCreate, db: Session = Depends(get_db)):
    db_material = models.Material(**material.model_dump())
    db.add(db_material)
    db.commit()
    db.refresh(db_material)
    return db_material


@router.get("/", response_model=List[schemas.Material])
def list_materials(db: Session = Depends(get_db)):
    return db.query(models.Material).order_by(
        models.Material.is_favorite.desc(), models.Material.name
    ).all()


@router.get("/{material_id}", response_model=schemas.Material)
def get_material(material_id: int, db: Session = Depends(get_db)):
    material = db.query(models.Material).filter(models.Material.id == material_id).first()
    if not material:
        raise HTTPException(status_code=404, detail="Material not found")
    return material


@router.patch("/{material_id}", response_model=schemas.Material)
def update_material(material_id: int, update: schemas.MaterialUpdate, db: Session = Depends(get_db)):
    material = db.query(models.Material).filter(models.Material.id == material_id).first()
    if not material:
        raise HTTPException(status_code=404, detail="Material not found")
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(material, field, value)
    db.commit()
    db.refresh(material)
    return material


@router.delete("/{material_id}")
def delete_material(material_id: int, db: Session = Depends(get_db)):
    material = db.query(models.Material).filter(models.Material.id == material_id).first()
    if not material:
        raise HTTPException(status_code=404, detail="Material not found")
    # Lines that used it stay, unpriced until a new material is picked
    db.query(models.ProjectLineItem).filter(
        models.ProjectLineItem.material_id == material_id
    ).update({"material_id": None})
    db.delete(material)
    db.commit()
    return {"ok": True}
