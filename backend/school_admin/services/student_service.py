"""
Service métier des élèves.

Coordonne les vérifications d'existence, les règles de mise à jour et
l'envoi de l'email de vérification après création. Les requêtes SQL sont
déléguées au repository ; ce module ne fait que décider quoi appeler et
comment traduire les échecs en erreurs API.
"""

import logging
import math
from typing import Optional

from sqlalchemy.orm import Session

from school_admin.exceptions import BadRequestError, InternalError, NotFoundError
from school_admin.repositories import students as student_repository
from school_admin.repositories import users as user_repository
from school_admin.repositories.students import DuplicateEmailError, RecordNotFoundError
from school_admin.schemas.student import StudentSaveFailed
from school_admin.services.email_service import send_account_verification_email

logger = logging.getLogger(__name__)

STUDENT_NOT_FOUND = "Student not found"
ADD_STUDENT_AND_EMAIL_SEND_SUCCESS = "Student added and verification email sent successfully."
ADD_STUDENT_BUT_EMAIL_SEND_FAIL = "Student added, but failed to send verification email."


def check_student_id(db: Session, student_id: int) -> None:
    """Lève NotFoundError si aucun utilisateur ne porte cet ID."""
    if user_repository.find_user_by_id(db, student_id) is None:
        raise NotFoundError(STUDENT_NOT_FOUND)


def get_all_students(db: Session, page: int = 1, limit: int = 10, search: str = "",
                     class_filter: Optional[str] = None,
                     section_filter: Optional[str] = None) -> dict:
    """Retourne une page d'élèves et les informations de pagination."""
    result = student_repository.find_all_students(
        db,
        page=page,
        limit=limit,
        search=search,
        class_filter=class_filter,
        section_filter=section_filter,
    )

    return {
        "success": True,
        "data": result["students"],
        "pagination": {
            "total": result["total"],
            "page": result["page"],
            "limit": result["limit"],
            "totalPages": math.ceil(result["total"] / result["limit"]),
        },
    }


def get_student_detail(db: Session, student_id: int) -> dict:
    check_student_id(db, student_id)

    # L'élève peut disparaître entre la vérification et la jointure (suppression concurrente)
    student = student_repository.find_student_detail(db, student_id)
    if student is None:
        raise NotFoundError(STUDENT_NOT_FOUND)

    return {"success": True, "data": student}


def add_new_student(db: Session, payload: dict) -> dict:
    """
    Crée un élève puis tente d'envoyer l'email de vérification.

    L'enregistrement fait foi : un échec d'envoi ne fait pas échouer la création,
    il dégrade seulement le message retourné. Un email déjà utilisé remonte tel
    quel (DuplicateEmailError) pour être exposé en 409.
    """
    try:
        result = student_repository.add_or_update_student(db, payload)
    except DuplicateEmailError:
        raise
    except Exception as exc:
        logger.error("Échec de student_add_update pour %s : %s", payload.get("email"), exc)
        raise InternalError("Unable to add student") from exc

    if isinstance(result, StudentSaveFailed):
        logger.error("student_add_update a refusé %s : %s", payload.get("email"), result.message)
        raise InternalError("Unable to add student")

    data = {"userId": result.user_id, "message": result.message}

    try:
        send_account_verification_email(db, user_id=result.user_id, user_email=payload["email"])
    except Exception as exc:
        db.rollback()
        logger.warning(
            "Élève %s créé mais email de vérification non envoyé à %s : %s",
            result.user_id, payload.get("email"), exc,
        )
        return {"success": True, "data": data, "message": ADD_STUDENT_BUT_EMAIL_SEND_FAIL}

    return {"success": True, "data": data, "message": ADD_STUDENT_AND_EMAIL_SEND_SUCCESS}


def update_student(db: Session, student_id: int, payload: dict) -> dict:
    """Met à jour le nom et/ou l'email d'un élève existant."""
    check_student_id(db, student_id)

    name = payload.get("name")
    email = payload.get("email")
    if not name and not email:
        raise BadRequestError("At least one field (name or email) must be provided for update")

    try:
        updated = student_repository.update_student_basic(db, student_id, name or None, email or None)
    except DuplicateEmailError:
        raise
    except RecordNotFoundError:
        raise NotFoundError(STUDENT_NOT_FOUND)
    except Exception as exc:
        logger.error("Échec de mise à jour de l'élève %s : %s", student_id, exc)
        raise InternalError("Unable to update student") from exc

    return {
        "success": True,
        "message": "Student updated successfully",
        "updated": updated,
    }


def set_student_status(db: Session, student_id: int, is_active: bool) -> dict:
    """
    Active ou désactive l'accès d'un élève.
    Le relecteur n'est pas encore transmis par l'appelant : reviewer_id reste à None.
    """
    check_student_id(db, student_id)

    reviewer_id = None
    affected_rows = student_repository.set_student_status(
        db, user_id=student_id, reviewer_id=reviewer_id, status=is_active
    )
    if affected_rows <= 0:
        raise InternalError("Unable to change student status")

    return {"success": True, "message": "Student status changed successfully"}


def delete_student(db: Session, student_id: int) -> dict:
    check_student_id(db, student_id)

    try:
        student_repository.delete_student(db, student_id)
    except RecordNotFoundError:
        raise NotFoundError(STUDENT_NOT_FOUND)

    return {"success": True, "message": "Student deleted successfully"}
