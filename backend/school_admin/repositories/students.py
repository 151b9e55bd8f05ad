"""
Requêtes SQL des élèves (comptes users de rôle « student » + user_profiles).

Ce module ne porte aucune règle métier : il construit les requêtes,
les exécute et retourne les lignes brutes. Les erreurs propres à la base
sont traduites en DuplicateEmailError / RecordNotFoundError pour que
le service puisse les distinguer d'une panne générique.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, func, or_, select, text, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, aliased

from school_admin.models.role import Role
from school_admin.models.user import User, UserProfile
from school_admin.schemas.student import StudentSaved, StudentSaveFailed, StudentSaveResult

logger = logging.getLogger(__name__)

STUDENT_ROLE = "student"
UNIQUE_VIOLATION = "23505"


class DuplicateEmailError(Exception):
    """Un autre utilisateur possède déjà cette adresse email."""


class RecordNotFoundError(LookupError):
    """Aucune ligne ne correspond à l'identifiant demandé."""


def _is_unique_violation(exc: IntegrityError) -> bool:
    return getattr(exc.orig, "pgcode", None) == UNIQUE_VIOLATION


def _student_filters(search: str = "", class_filter: Optional[str] = None,
                     section_filter: Optional[str] = None) -> list:
    """
    Construit la liste ordonnée des prédicats de recherche.
    Partagée par la requête paginée et la requête COUNT pour que le total
    corresponde toujours exactement aux lignes filtrées.
    """
    student_role_id = (
        select(Role.id)
        .where(Role.name.ilike(STUDENT_ROLE))
        .scalar_subquery()
    )
    filters = [User.role_id == student_role_id]

    if search:
        pattern = f"%{search}%"
        filters.append(or_(User.name.ilike(pattern), User.email.ilike(pattern)))

    if class_filter:
        filters.append(UserProfile.class_name == class_filter)

    if section_filter:
        filters.append(UserProfile.section_name == section_filter)

    return filters


def find_all_students(db: Session, page: int = 1, limit: int = 10, search: str = "",
                      class_filter: Optional[str] = None,
                      section_filter: Optional[str] = None) -> dict:
    """Retourne une page d'élèves filtrés, triés par ID, et le total correspondant."""
    filters = _student_filters(search, class_filter, section_filter)
    offset = (page - 1) * limit

    rows = db.execute(
        select(
            User.id,
            User.name,
            User.email,
            User.last_login.label("lastLogin"),
            User.is_active.label("systemAccess"),
            UserProfile.class_name.label("class"),
            UserProfile.section_name.label("section"),
            UserProfile.roll,
        )
        .outerjoin(UserProfile, UserProfile.user_id == User.id)
        .where(*filters)
        .order_by(User.id)
        .limit(limit)
        .offset(offset)
    ).mappings().all()

    total = db.execute(
        select(func.count())
        .select_from(User)
        .outerjoin(UserProfile, UserProfile.user_id == User.id)
        .where(*filters)
    ).scalar() or 0

    return {
        "students": [dict(row) for row in rows],
        "total": int(total),
        "page": page,
        "limit": limit,
    }


def add_or_update_student(db: Session, payload: dict) -> StudentSaveResult:
    """
    Délègue la création (ou mise à jour) du compte et du profil à la routine
    student_add_update, qui retourne un statut, un message et l'ID généré.
    """
    try:
        row = db.execute(
            text("SELECT * FROM student_add_update(CAST(:payload AS jsonb))"),
            {"payload": json.dumps(payload, default=str)},
        ).mappings().first()
    except IntegrityError as exc:
        db.rollback()
        if _is_unique_violation(exc):
            raise DuplicateEmailError(payload.get("email")) from exc
        raise

    if row is None:
        db.rollback()
        return StudentSaveFailed(message="student_add_update returned no result")

    if not row["status"]:
        db.rollback()
        return StudentSaveFailed(message=row["message"] or "student_add_update failed")

    db.commit()
    return StudentSaved(user_id=row["userId"], message=row["message"])


def find_student_detail(db: Session, student_id: int) -> Optional[dict]:
    """Retourne la fiche complète d'un élève (compte, profil, nom du référent), ou None."""
    reporter = aliased(User)
    row = db.execute(
        select(
            User.id,
            User.name,
            User.email,
            User.last_login.label("lastLogin"),
            User.is_active.label("systemAccess"),
            UserProfile.phone,
            UserProfile.gender,
            UserProfile.dob,
            UserProfile.class_name.label("class"),
            UserProfile.section_name.label("section"),
            UserProfile.roll,
            UserProfile.father_name.label("fatherName"),
            UserProfile.father_phone.label("fatherPhone"),
            UserProfile.mother_name.label("motherName"),
            UserProfile.mother_phone.label("motherPhone"),
            UserProfile.guardian_name.label("guardianName"),
            UserProfile.guardian_phone.label("guardianPhone"),
            UserProfile.relation_of_guardian.label("relationOfGuardian"),
            UserProfile.current_address.label("currentAddress"),
            UserProfile.permanent_address.label("permanentAddress"),
            UserProfile.admission_dt.label("admissionDate"),
            reporter.name.label("reporterName"),
        )
        .outerjoin(UserProfile, UserProfile.user_id == User.id)
        .outerjoin(reporter, User.reporter_id == reporter.id)
        .where(User.id == student_id)
    ).mappings().first()

    return dict(row) if row is not None else None


def set_student_status(db: Session, user_id: int, reviewer_id: Optional[int], status: bool) -> int:
    """Active ou désactive l'accès d'un élève et trace la revue. Retourne le nombre de lignes modifiées."""
    result = db.execute(
        update(User)
        .where(User.id == user_id)
        .values(
            is_active=status,
            status_last_reviewed_dt=datetime.now(timezone.utc),
            status_last_reviewer_id=reviewer_id,
        )
    )
    db.commit()
    return result.rowcount


def update_student_basic(db: Session, student_id: int, name: Optional[str] = None,
                         email: Optional[str] = None) -> dict:
    """
    Met à jour le nom et/ou l'email (seuls les champs non vides sont écrits).
    Lève RecordNotFoundError si aucune ligne ne correspond, DuplicateEmailError
    si l'email est déjà pris.
    """
    values = {"updated_dt": datetime.now()}
    if name:
        values["name"] = name
    if email:
        values["email"] = email

    try:
        row = db.execute(
            update(User)
            .where(User.id == student_id)
            .values(**values)
            .returning(User.id, User.name, User.email)
        ).mappings().first()
    except IntegrityError as exc:
        db.rollback()
        if _is_unique_violation(exc):
            raise DuplicateEmailError(email) from exc
        raise

    if row is None:
        db.rollback()
        raise RecordNotFoundError(f"Student {student_id} not found")

    db.commit()
    return dict(row)


def delete_student(db: Session, student_id: int) -> dict:
    """
    Supprime le profil puis le compte d'un élève, dans la même transaction.
    Le profil doit partir en premier pour ne pas laisser de référence orpheline.
    """
    db.execute(delete(UserProfile).where(UserProfile.user_id == student_id))

    row = db.execute(
        delete(User).where(User.id == student_id).returning(User.id)
    ).mappings().first()

    if row is None:
        db.rollback()
        raise RecordNotFoundError(f"Student {student_id} not found")

    db.commit()
    logger.info("Élève supprimé : %s", student_id)
    return dict(row)
