import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..costing import ColorLayer, LineKind, MaterialLine, QuoteValidationError, parse_amount
from ..costing.draft import QuoteDraft
from ..costing.material_lookup import GRAMS_PER_KG, MaterialCatalog
from ..costing.multi_material import effective_price, has_custom_price
from ..database import get_db
from .materials import load_catalog

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projects", tags=["projects"])


def _material_id(material_ref, lookup) -> Optional[int]:
    """Primary key to store for a material ref. Refs the catalog doesn't know are stored as NULL."""
    if material_ref is None or lookup(material_ref) is None:
        return None
    try:
        return int(material_ref)
    except (TypeError, ValueError):
        return None


def _ref(material_id) -> Optional[str]:
    return None if material_id is None else str(material_id)


def build_draft(line_items: List[schemas.LineItemIn], color_layers: List[schemas.ColorLayerIn],
                margin, catalog: MaterialCatalog) -> QuoteDraft:
    """Turn request lines into a QuoteDraft. Raises HTTPException(400) on malformed lines."""
    draft = QuoteDraft(catalog, margin_percent=margin)
    for item in line_items:
        if item.material_id is not None and item.kind != LineKind.MATERIAL:
            raise HTTPException(
                status_code=400,
                detail=f"Only material lines reference a material, got kind={item.kind.value}",
            )
        fields = {"description": item.description, "quantity": item.quantity}
        if item.unit_price is not None:
            fields["unit_price"] = item.unit_price
        if item.kind == LineKind.MATERIAL:
            fields["material_ref"] = _ref(item.material_id)
        draft.add_line(item.kind, **fields)

    if color_layers:
        draft.add_layers(
            ColorLayer(
                id=f"layer-{i}",
                material_ref=_ref(layer.material_id),
                mass_grams=layer.mass_grams,
                custom_unit_price=layer.custom_unit_price,
            )
            for i, layer in enumerate(color_layers, start=1)
        )
    return draft


def _rows_from_draft(draft: QuoteDraft) -> List[models.ProjectLineItem]:
    """
    Persistable rows in display order.

    A multicolor line is stored as one material row per layer; the sum of
    mass × price per gram over the layers equals the multicolor line total.
    A hand-typed layer price is kept in custom_unit_price so the row reloads
    as priced.
    """
    rows = []
    for line in draft.lines:
        if isinstance(line, MaterialLine) and line.layers:
            for layer in line.layers:
                material = draft.lookup(layer.material_ref) if layer.material_ref is not None else None
                price = effective_price(layer, draft.lookup)
                rows.append(models.ProjectLineItem(
                    kind=LineKind.MATERIAL.value,
                    description=material.name if material else "",
                    quantity=layer.mass,
                    unit_price=(price or 0.0) / GRAMS_PER_KG,
                    material_id=_material_id(layer.material_ref, draft.lookup),
                    custom_unit_price=price if has_custom_price(layer) else None,
                ))
            continue
        rows.append(models.ProjectLineItem(
            kind=line.kind.value,
            description=line.description,
            quantity=parse_amount(line.quantity),
            unit_price=parse_amount(line.unit_price),
            material_id=_material_id(getattr(line, "material_ref", None), draft.lookup),
        ))
    for position, row in enumerate(rows):
        row.position = position
    return rows


def draft_from_project(project: models.Project, catalog: MaterialCatalog) -> QuoteDraft:
    """Rebuild the draft for a saved project. Saved unit prices and descriptions win over today's catalog."""
    draft = QuoteDraft(catalog, margin_percent=project.profit_margin)
    for row in project.line_items:
        if row.kind == LineKind.MATERIAL.value and row.custom_unit_price is not None:
            line = draft.add_layers(
                [ColorLayer(
                    id=str(row.id),
                    material_ref=_ref(row.material_id),
                    mass_grams=row.quantity,
                    custom_unit_price=row.custom_unit_price,
                )],
                line_id=str(row.id),
            )
            line.description = row.description or ""
            continue

        fields = {
            "description": row.description or "",
            "quantity": row.quantity,
            "unit_price": row.unit_price,
        }
        if row.kind == LineKind.MATERIAL.value:
            fields["material_ref"] = _ref(row.material_id)
        draft.add_line(row.kind, line_id=str(row.id), **fields)
    return draft


def calculate_totals(project: models.Project, catalog: MaterialCatalog, db: Session) -> dict:
    """
    Re-price a saved project and store the roll-ups on it.
    Returns the priced quote breakdown.
    """
    priced = draft_from_project(project, catalog).priced_quote()
    project.weight_grams = priced["weight_grams"]
    project.material_cost = priced["material_cost"]
    project.labor_cost = priced["labor_cost"]
    project.amortization_cost = priced["amortization_cost"]
    project.subtotal = priced["subtotal"]
    project.total_price = priced["total"]
    project.profit = priced["profit"]
    db.commit()
    if priced["profit"] < 0:
        logger.warning("Project %s saved at a loss (margin %s%%)", project.id, project.profit_margin)
    return priced


def _replace_lines(project: models.Project, draft: QuoteDraft) -> None:
    try:
        draft.validate_for_save()
    except QuoteValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    project.line_items = _rows_from_draft(draft)


def _get_project(project_id: int, db: Session) -> models.Project:
    project = db.query(models.Project).filter(models.Project.id == project_id).first()
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


# --- Endpoints ---

@router.post("/preview")
def preview_quote(request: schemas.QuotePreview, db: Session = Depends(get_db)):
    """Price lines without saving. Called on every edit in the editor."""
    catalog = load_catalog(db)
    draft = build_draft(request.line_items, request.color_layers, request.profit_margin, catalog)
    return draft.priced_quote()


@router.post("/")
def create_project(project: schemas.ProjectCreate, db: Session = Depends(get_db)):
    catalog = load_catalog(db)
    draft = build_draft(project.line_items, project.color_layers, project.profit_margin, catalog)

    db_project = models.Project(
        name=project.name,
        print_time_hours=parse_amount(project.print_time_hours),
        profit_margin=parse_amount(project.profit_margin, allow_negative=True),
        notes=project.notes,
    )
    _replace_lines(db_project, draft)
    db.add(db_project)
    db.flush()

    priced = calculate_totals(db_project, catalog, db)
    db.refresh(db_project)
    return _project_to_dict(db_project, priced)


@router.get("/")
def list_projects(skip: int = 0, limit: int = 50, db: Session = Depends(get_db)):
    projects = db.query(models.Project).order_by(
        models.Project.created_at.desc()
    ).offset(skip).limit(limit).all()
    return [_project_summary(p) for p in projects]


@router.get("/{project_id}")
def get_project(project_id: int, db: Session = Depends(get_db)):
    project = _get_project(project_id, db)
    priced = draft_from_project(project, load_catalog(db)).priced_quote()
    return _project_to_dict(project, priced)


@router.patch("/{project_id}")
def update_project(project_id: int, update: schemas.ProjectUpdate, db: Session = Depends(get_db)):
    project = _get_project(project_id, db)
    catalog = load_catalog(db)
    data = update.model_dump(exclude_unset=True)

    if "name" in data and data["name"]:
        project.name = data["name"]
    if "notes" in data:
        project.notes = data["notes"]
    if "print_time_hours" in data:
        project.print_time_hours = parse_amount(data["print_time_hours"])
    if "profit_margin" in data:
        project.profit_margin = parse_amount(data["profit_margin"], allow_negative=True)
    if update.line_items is not None or update.color_layers is not None:
        draft = build_draft(update.line_items or [], update.color_layers or [], project.profit_margin, catalog)
        _replace_lines(project, draft)
        db.flush()

    priced = calculate_totals(project, catalog, db)
    db.refresh(project)
    return _project_to_dict(project, priced)


@router.delete("/{project_id}")
def delete_project(project_id: int, db: Session = Depends(get_db)):
    project = _get_project(project_id, db)
    db.delete(project)
    db.commit()
    return {"ok": True}


@router.post("/{project_id}/move")
def move_line(project_id: int, request: schemas.MoveRequest, db: Session = Depends(get_db)):
    """Drag-and-drop reorder. Positions change, totals don't."""
    project = _get_project(project_id, db)
    catalog = load_catalog(db)
    draft = draft_from_project(project, catalog)
    draft.move_line(request.from_index, request.to_index)

    rows_by_id = {str(row.id): row for row in project.line_items}
    for position, line in enumerate(draft.lines):
        rows_by_id[line.id].position = position
    db.commit()
    db.refresh(project)

    priced = draft_from_project(project, catalog).priced_quote()
    return _project_to_dict(project, priced)


@router.put("/{project_id}/margin")
def update_margin(project_id: int, request: schemas.MarginRequest, db: Session = Depends(get_db)):
    """
    Change the profit margin on a saved project.

    Any real number is accepted; a negative margin prices below cost.
    """
    project = _get_project(project_id, db)
    project.profit_margin = parse_amount(request.profit_margin, allow_negative=True)
    priced = calculate_totals(project, load_catalog(db), db)
    db.refresh(project)
    return {
        "project_id": project.id,
        "profit_margin": project.profit_margin,
        "subtotal": project.subtotal,
        "total": project.total_price,
        "profit": project.profit,
        "margin_options": priced["margin_options"],
    }


def _project_summary(p: models.Project) -> dict:
    return {
        "id": p.id,
        "name": p.name,
        "weight_grams": p.weight_grams,
        "subtotal": p.subtotal,
        "total_price": p.total_price,
        "profit": p.profit,
        "profit_margin": p.profit_margin,
        "created_at": p.created_at.isoformat() if p.created_at else None,
    }


def _project_to_dict(p: models.Project, priced: dict) -> dict:
    line_totals = {line["id"]: line["total"] for line in priced["lines"]}
    return {
        "id": p.id,
        "name": p.name,
        "print_time_hours": p.print_time_hours,
        "profit_margin": p.profit_margin,
        "notes": p.notes,
        "weight_grams": p.weight_grams,
        "material_cost": p.material_cost,
        "labor_cost": p.labor_cost,
        "amortization_cost": p.amortization_cost,
        "subtotal": p.subtotal,
        "total_price": p.total_price,
        "profit": p.profit,
        "created_at": p.created_at.isoformat() if p.created_at else None,
        "updated_at": p.updated_at.isoformat() if p.updated_at else None,
        "line_items": [_item_to_dict(i, line_totals) for i in p.line_items],
        "kind_subtotals": priced["kind_subtotals"],
        "unpriced_line_ids": priced["unpriced_line_ids"],
        "margin_options": priced["margin_options"],
    }


def _item_to_dict(i: models.ProjectLineItem, line_totals: dict) -> dict:
    return {
        "id": i.id,
        "position": i.position,
        "kind": i.kind,
        "description": i.description,
        "quantity": i.quantity,
        "unit_price": i.unit_price,
        "total": line_totals.get(str(i.id), 0.0),
        "material_id": i.material_id,
        "custom_unit_price": i.custom_unit_price,
    }
