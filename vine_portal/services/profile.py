"""
Member self-service: the caller's own profile, their children and spouse
candidates.

Public API
----------
get_own_profile(db, user_id)                   → MemberProfile | None
create_own_profile(db, user_id, payload)       → MemberProfile
update_own_profile(db, user_id, payload)       → MemberProfile
list_children(db, ctx, parent_id)              → list[Child]
create_child(db, ctx, payload)                 → Child
update_child(db, ctx, payload)                 → Child
delete_child(db, ctx, child_id)                → None
available_spouses(db, user_id)                 → SpouseCandidates

A profile belongs to one identity (`user_id`). Children are reachable by
their parents; roles holding manage-members may act on any child.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from vine_portal.core.errors import Conflict, DataStoreError, Forbidden, NotFound, ValidationFailed
from vine_portal.models.member import Child, MemberProfile
from vine_portal.schemas.profile import ChildCreate, ChildUpdate, MemberProfileIn
from vine_portal.services.gateway import AuthContext
from vine_portal.services.permissions import Capability, has_capability

logger = logging.getLogger("vine_portal.services.profile")

_NOT_NULL_CHILD_FIELDS = frozenset({"date_of_birth", "parent1_id", "photo_permission"})


# ---------------------------------------------------------------------------
# Own profile
# ---------------------------------------------------------------------------

def get_own_profile(db: Session, user_id: str) -> Optional[MemberProfile]:
    try:
        return db.query(MemberProfile).filter(MemberProfile.user_id == user_id).first()
    except SQLAlchemyError as exc:
        raise DataStoreError("Failed to fetch profile", exc) from exc


def _profile_values(payload: MemberProfileIn) -> dict[str, Any]:
    return {
        "name": payload.name,
        "phone": payload.phone,
        "email": payload.email,
        "date_of_birth": payload.date_of_birth,
        "gender": payload.gender,
        "is_baptized": payload.is_baptized,
        "pays_tithe": payload.pays_tithe,
        "volunteer_areas": list(payload.volunteer_areas),
        "volunteer_outros_details": payload.volunteer_outros_details or None,
        "life_group": payload.life_group or None,
        "is_married": payload.is_married,
        "spouse_name": payload.spouse_name or None,
        "spouse_id": payload.spouse_id,
    }


def _check_spouse(db: Session, spouse_id: Optional[int], own_id: Optional[int]) -> None:
    if spouse_id is None:
        return
    if spouse_id == own_id:
        raise ValidationFailed("A profile cannot be its own spouse", code="INVALID_SPOUSE")
    if db.get(MemberProfile, spouse_id) is None:
        raise NotFound("Member profile", spouse_id)


def create_own_profile(db: Session, user_id: str, payload: MemberProfileIn) -> MemberProfile:
    if get_own_profile(db, user_id) is not None:
        raise Conflict("Profile already exists. Use PUT to update.", code="PROFILE_EXISTS")
    _check_spouse(db, payload.spouse_id, None)

    profile = MemberProfile(user_id=user_id, **_profile_values(payload))
    try:
        db.add(profile)
        db.commit()
        db.refresh(profile)
    except SQLAlchemyError as exc:
        db.rollback()
        raise DataStoreError("Failed to create profile", exc) from exc
    logger.info("Profile %s created", profile.id)
    return profile


def update_own_profile(db: Session, user_id: str, payload: MemberProfileIn) -> MemberProfile:
    profile = get_own_profile(db, user_id)
    if profile is None:
        raise NotFound("Member profile", user_id)
    _check_spouse(db, payload.spouse_id, profile.id)

    for name, value in _profile_values(payload).items():
        setattr(profile, name, value)
    try:
        db.commit()
        db.refresh(profile)
    except SQLAlchemyError as exc:
        db.rollback()
        raise DataStoreError("Failed to update profile", exc) from exc
    return profile


# ---------------------------------------------------------------------------
# Children
# ---------------------------------------------------------------------------

def _check_parent_access(db: Session, ctx: AuthContext, parent_ids: Iterable[Optional[int]]) -> None:
    if has_capability(ctx.role, Capability.manage_members):
        return
    own = get_own_profile(db, ctx.identity.id)
    if own is None or own.id not in set(parent_ids):
        raise Forbidden(
            "Only a parent can manage this child",
            details={"capability": Capability.manage_members.value, "role": ctx.role.value},
            code="NOT_PARENT",
        )


def _check_parents_exist(db: Session, *parent_ids: Optional[int]) -> None:
    for parent_id in parent_ids:
        if parent_id is not None and db.get(MemberProfile, parent_id) is None:
            raise NotFound("Member profile", parent_id)


def list_children(db: Session, ctx: AuthContext, parent_id: int) -> list[Child]:
    _check_parent_access(db, ctx, [parent_id])
    try:
        return (
            db.query(Child)
            .filter(or_(Child.parent1_id == parent_id, Child.parent2_id == parent_id))
            .order_by(Child.date_of_birth.asc(), Child.id.asc())
            .all()
        )
    except SQLAlchemyError as exc:
        raise DataStoreError("Failed to fetch children", exc) from exc


def create_child(db: Session, ctx: AuthContext, payload: ChildCreate) -> Child:
    _check_parents_exist(db, payload.parent1_id, payload.parent2_id)
    _check_parent_access(db, ctx, [payload.parent1_id, payload.parent2_id])

    child = Child(
        name=(payload.name or "").strip() or None,
        date_of_birth=payload.date_of_birth,
        parent1_id=payload.parent1_id,
        parent2_id=payload.parent2_id,
        allergies=payload.allergies or None,
        medical_notes=payload.medical_notes or None,
        special_needs=payload.special_needs or None,
        photo_permission=payload.photo_permission,
    )
    try:
        db.add(child)
        db.commit()
        db.refresh(child)
    except SQLAlchemyError as exc:
        db.rollback()
        raise DataStoreError("Failed to create child", exc) from exc
    return child


def _get_child(db: Session, child_id: int) -> Child:
    child = db.get(Child, child_id)
    if child is None:
        raise NotFound("Child", child_id)
    return child


def update_child(db: Session, ctx: AuthContext, payload: ChildUpdate) -> Child:
    child = _get_child(db, payload.id)
    _check_parent_access(db, ctx, [child.parent1_id, child.parent2_id])

    changes = payload.model_dump(exclude_unset=True, exclude={"id"})
    changes = {
        name: value for name, value in changes.items()
        if value is not None or name not in _NOT_NULL_CHILD_FIELDS
    }
    _check_parents_exist(db, changes.get("parent1_id"), changes.get("parent2_id"))
    # the caller must still be a parent after a reassignment
    _check_parent_access(
        db,
        ctx,
        [changes.get("parent1_id", child.parent1_id), changes.get("parent2_id", child.parent2_id)],
    )

    for name, value in changes.items():
        setattr(child, name, value)
    try:
        db.commit()
        db.refresh(child)
    except SQLAlchemyError as exc:
        db.rollback()
        raise DataStoreError("Failed to update child", exc) from exc
    return child


def delete_child(db: Session, ctx: AuthContext, child_id: int) -> None:
    child = _get_child(db, child_id)
    _check_parent_access(db, ctx, [child.parent1_id, child.parent2_id])
    try:
        db.delete(child)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise DataStoreError("Failed to delete child", exc) from exc
    logger.info("Child %s deleted", child_id)


# ---------------------------------------------------------------------------
# Spouse candidates
# ---------------------------------------------------------------------------

@dataclass
class SpouseCandidates:
    candidates: list[MemberProfile] = field(default_factory=list)
    warning: Optional[str] = None


def available_spouses(db: Session, user_id: str) -> SpouseCandidates:
    """
    Profiles with no linked spouse and a gender different from the caller's,
    excluding the caller, by name. Profiles without a gender never match.
    """
    own = get_own_profile(db, user_id)
    if own is None:
        raise NotFound("Member profile", user_id)
    if not own.gender:
        return SpouseCandidates(warning="missing_gender")
    try:
        rows = (
            db.query(MemberProfile)
            .filter(
                MemberProfile.spouse_id.is_(None),
                MemberProfile.id != own.id,
                MemberProfile.gender.is_not(None),
                MemberProfile.gender != own.gender,
            )
            .order_by(MemberProfile.name.asc(), MemberProfile.id.asc())
            .all()
        )
    except SQLAlchemyError as exc:
        raise DataStoreError("Failed to fetch available spouses", exc) from exc
    return SpouseCandidates(candidates=rows)
