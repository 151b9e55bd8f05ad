"""
Router pour les élèves.
GET    /api/v1/students : liste paginée, recherche, filtres classe/section
GET    /api/v1/students/{id} : fiche détaillée
POST   /api/v1/students : création + email de vérification
PUT    /api/v1/students/{id} : mise à jour nom / email
PATCH  /api/v1/students/{id}/status : activation / désactivation du compte
DELETE /api/v1/students/{id} : suppression
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from school_admin.database import get_db
from school_admin.exceptions import BadRequestError, ConflictError, ValidationFailedError
from school_admin.repositories.students import DuplicateEmailError
from school_admin.schemas.student import (
    MessageResponse,
    StudentCreate,
    StudentCreateResponse,
    StudentDetailResponse,
    StudentListResponse,
    StudentStatusUpdate,
    StudentUpdate,
    StudentUpdateResponse,
)
from school_admin.services import student_service
from school_admin.validators import validate_create_student

router = APIRouter(prefix="/api/v1/students", tags=["Students"])


def parse_student_id(raw_id: str) -> int:
    """Les IDs invalides sont rejetés en 400 (et non 422) avant tout appel au service."""
    if not raw_id or not (raw_id.isascii() and raw_id.isdigit()) or int(raw_id) <= 0:
        raise BadRequestError("Valid student ID is required")
    return int(raw_id)


@router.get("", response_model=StudentListResponse, summary="Lister les élèves")
def list_students(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    search: str = "",
    class_filter: Optional[str] = Query(None, alias="class"),
    section_filter: Optional[str] = Query(None, alias="section"),
    db: Session = Depends(get_db),
):
    """Retourne une page d'élèves triés par ID, filtrés par nom/email, classe et section."""
    return student_service.get_all_students(
        db,
        page=page,
        limit=limit,
        search=search,
        class_filter=class_filter,
        section_filter=section_filter,
    )


@router.post("", response_model=StudentCreateResponse, status_code=201, summary="Créer un élève")
def create_student(data: StudentCreate, db: Session = Depends(get_db)):
    """
    Crée un élève et son profil, puis envoie l'email de vérification.
    Un échec d'envoi n'annule pas la création (message dégradé, succès conservé).
    """
    validation = validate_create_student(data.name, data.email)
    if not validation.is_valid:
        raise ValidationFailedError(validation.errors)

    try:
        return student_service.add_new_student(db, data.model_dump(mode="json"))
    except DuplicateEmailError:
        raise ConflictError("A student with this email already exists")


@router.get("/{student_id}", response_model=StudentDetailResponse, summary="Détail d'un élève")
def get_student(student_id: str, db: Session = Depends(get_db)):
    return student_service.get_student_detail(db, parse_student_id(student_id))


@router.put("/{student_id}", response_model=StudentUpdateResponse, summary="Modifier un élève")
def update_student(student_id: str, data: StudentUpdate, db: Session = Depends(get_db)):
    """Met à jour le nom et/ou l'email. Au moins un des deux doit être fourni."""
    sid = parse_student_id(student_id)
    try:
        return student_service.update_student(db, sid, data.model_dump())
    except DuplicateEmailError:
        raise ConflictError("Email already in use")


@router.patch("/{student_id}/status", response_model=MessageResponse,
              summary="Activer / désactiver un élève")
def set_student_status(student_id: str, data: Optional[StudentStatusUpdate] = None,
                       db: Session = Depends(get_db)):
    sid = parse_student_id(student_id)
    is_active = data.is_active if data is not None else None
    if not isinstance(is_active, bool):
        raise BadRequestError("is_active must be a boolean value (true/false)")
    return student_service.set_student_status(db, sid, is_active)


@router.delete("/{student_id}", response_model=MessageResponse, summary="Supprimer un élève")
def delete_student(student_id: str, db: Session = Depends(get_db)):
    """Supprime le profil puis le compte de l'élève."""
    return student_service.delete_student(db, parse_student_id(student_id))
