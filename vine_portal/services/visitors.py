"""
Visitor service: registration (visitor + children) and visitor-children CRUD.

Public API
----------
register_visitor(db, payload)            → Registration   (two commits)
list_visitors(db)                        → list[Visitor]
list_visitor_children(db, search)        → list[VisitorChild]
create_visitor_child(db, payload)        → VisitorChild
update_visitor_child(db, payload)        → VisitorChild

Registration is a two-step write. The visitor row is committed first and is
authoritative from then on: if saving the children fails, nothing is rolled
back and a PartialFailure (207) carrying the visitor id is raised instead.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vine_portal.core.errors import DataStoreError, NotFound, PartialFailure
from vine_portal.models.visitor import Visitor, VisitorChild
from vine_portal.schemas.visitor import (
    VisitorChildCreate,
    VisitorChildUpdate,
    VisitorCreate,
)

logger = logging.getLogger("vine_portal.services.visitors")

_NOT_NULL_CHILD_FIELDS = frozenset(
    {"name", "date_of_birth", "parent_name", "parent_phone", "photo_permission"}
)


@dataclass
class Registration:
    visitor: Visitor
    children: list[VisitorChild] = field(default_factory=list)


def _save_visitor(db: Session, payload: VisitorCreate) -> Visitor:
    visitor = Visitor(
        visit_date=payload.visit_date,
        name=payload.name,
        phone=payload.phone,
        how_found=payload.how_found,
        how_found_details=(payload.how_found_details or "").strip() or None,
    )
    try:
        db.add(visitor)
        db.commit()
        db.refresh(visitor)
    except SQLAlchemyError as exc:
        db.rollback()
        raise DataStoreError("Failed to register visitor", exc) from exc
    return visitor


def _save_children(db: Session, visitor: Visitor, payload: VisitorCreate) -> list[VisitorChild]:
    children = [
        VisitorChild(
            visitor_id=visitor.id,
            name=child.name,
            date_of_birth=child.date_of_birth,
            parent_name=visitor.name,
            parent_phone=visitor.phone,
            allergies=child.allergies or None,
            special_needs=child.special_needs or None,
            emergency_contact_name=child.emergency_contact_name or None,
            emergency_contact_phone=child.emergency_contact_phone or None,
            photo_permission=child.photo_permission,
        )
        for child in payload.children
    ]
    db.add_all(children)
    db.commit()
    for child in children:
        db.refresh(child)
    return children


def register_visitor(db: Session, payload: VisitorCreate) -> Registration:
    visitor = _save_visitor(db, payload)
    visitor_id = visitor.id
    logger.info("Visitor %s registered (%d children)", visitor_id, len(payload.children))

    if not payload.children:
        return Registration(visitor=visitor)

    try:
        children = _save_children(db, visitor, payload)
    except Exception as exc:
        db.rollback()
        logger.error("Children insert failed for visitor %s: %s", visitor_id, exc)
        raise PartialFailure(
            message="Visitor was registered, but the children could not be saved",
            code="CHILDREN_INSERT_FAILED",
            details={
                "visitorSaved": True,
                "visitorId": visitor_id,
                "childrenFailed": True,
                "childrenCount": len(payload.children),
                "error": str(exc),
            },
        ) from exc
    return Registration(visitor=visitor, children=children)


def list_visitors(db: Session) -> list[Visitor]:
    try:
        return db.query(Visitor).order_by(Visitor.visit_date.desc(), Visitor.id.desc()).all()
    except SQLAlchemyError as exc:
        raise DataStoreError("Failed to fetch visitors", exc) from exc


def list_visitor_children(db: Session, search: Optional[str] = None) -> list[VisitorChild]:
    query = db.query(VisitorChild)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(
                VisitorChild.name.ilike(pattern),
                VisitorChild.parent_phone.ilike(pattern),
                VisitorChild.parent_name.ilike(pattern),
            )
        )
    try:
        return query.order_by(VisitorChild.created_at.desc(), VisitorChild.id.desc()).all()
    except SQLAlchemyError as exc:
        raise DataStoreError("Failed to fetch visitor children", exc) from exc


def create_visitor_child(db: Session, payload: VisitorChildCreate) -> VisitorChild:
    child = VisitorChild(**payload.model_dump())
    try:
        db.add(child)
        db.commit()
        db.refresh(child)
    except SQLAlchemyError as exc:
        db.rollback()
        raise DataStoreError("Failed to create visitor child", exc) from exc
    return child


def update_visitor_child(db: Session, payload: VisitorChildUpdate) -> VisitorChild:
    child = db.get(VisitorChild, payload.id)
    if child is None:
        raise NotFound("Visitor child", payload.id)
    for name, value in payload.model_dump(exclude_unset=True, exclude={"id"}).items():
        if value is None and name in _NOT_NULL_CHILD_FIELDS:
            continue
        setattr(child, name, value)
    try:
        db.commit()
        db.refresh(child)
    except SQLAlchemyError as exc:
        db.rollback()
        raise DataStoreError("Failed to update visitor child", exc) from exc
    return child
