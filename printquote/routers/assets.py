from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from .. import models, schemas
from ..costing import AmortizationAsset, amortize, parse_amount
from ..database import get_db

router = APIRouter(prefix="/assets", tags=["assets"])

NUMERIC_FIELDS = {
    "acquisition_cost": False,
    "prints_per_month": False,
    "avg_profit_per_print": True,  # may be negative
}


def _clean(data: dict) -> dict:
    for field, allow_negative in NUMERIC_FIELDS.items():
        if field in data:
            data[field] = parse_amount(data[field], allow_negative=allow_negative)
    return data


def _get_asset(asset_id: int, db: Session) -> models.AmortizationAsset:
    asset = db.query(models.AmortizationAsset).filter(models.AmortizationAsset.id == asset_id).first()
    if not asset:
        raise HTTPException(status_code=404, detail="Asset not found")
    return asset


@router.post("/")
def create_asset(asset: schemas.AssetCreate, db: Session = Depends(get_db)):
    db_asset = models.AmortizationAsset(**_clean(asset.model_dump()))
    db.add(db_asset)
    db.commit()
    db.refresh(db_asset)
    return _asset_to_dict(db_asset)


@router.get("/")
def list_assets(db: Session = Depends(get_db)):
    assets = db.query(models.AmortizationAsset).order_by(models.AmortizationAsset.name).all()
    return [_asset_to_dict(a) for a in assets]


@router.get("/{asset_id}")
def get_asset(asset_id: int, db: Session = Depends(get_db)):
    return _asset_to_dict(_get_asset(asset_id, db))


@router.patch("/{asset_id}")
def update_asset(asset_id: int, update: schemas.AssetUpdate, db: Session = Depends(get_db)):
    asset = _get_asset(asset_id, db)
    for field, value in _clean(update.model_dump(exclude_unset=True)).items():
        setattr(asset, field, value)
    db.commit()
    db.refresh(asset)
    return _asset_to_dict(asset)


@router.delete("/{asset_id}")
def delete_asset(asset_id: int, db: Session = Depends(get_db)):
    asset = _get_asset(asset_id, db)
    db.delete(asset)
    db.commit()
    return {"ok": True}


def _asset_to_dict(a: models.AmortizationAsset) -> dict:
    """Stored fields plus the derived projection. months_to_break_even may be "not_applicable"."""
    result = amortize(AmortizationAsset(
        id=str(a.id),
        name=a.name,
        acquisition_cost=a.acquisition_cost,
        prints_per_month=a.prints_per_month,
        avg_profit_per_print=a.avg_profit_per_print,
    ))
    return {
        "id": a.id,
        "name": a.name,
        "acquisition_cost": a.acquisition_cost,
        "prints_per_month": a.prints_per_month,
        "avg_profit_per_print": a.avg_profit_per_print,
        "notes": a.notes,
        "created_at": a.created_at.isoformat() if a.created_at else None,
        **result.to_dict(),
    }
