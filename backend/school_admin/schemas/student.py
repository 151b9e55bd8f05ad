"""
Schémas Pydantic pour les élèves.
Les réponses exposent des clés camelCase (lastLogin, systemAccess, ...)
générées depuis les noms de champs Python.
"""

from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ValidationResult(BaseModel):
    """Résultat du validateur de création : champs en erreur → message."""
    is_valid: bool
    errors: Dict[str, str] = {}


# --- Corps de requête ---

class StudentCreate(BaseModel):
    """Schéma de création d'un élève (POST /students). Le format est vérifié par validators.py."""
    name: Any = None
    email: Any = None
    class_name: Optional[str] = None
    section_name: Optional[str] = None
    roll: Optional[int] = None
    dob: Optional[date] = None
    father_name: Optional[str] = None
    father_phone: Optional[str] = None
    mother_name: Optional[str] = None
    mother_phone: Optional[str] = None
    guardian_name: Optional[str] = None
    guardian_phone: Optional[str] = None
    relation_of_guardian: Optional[str] = None
    phone: Optional[str] = None
    gender: Optional[str] = None
    current_address: Optional[str] = None
    permanent_address: Optional[str] = None
    admission_dt: Optional[date] = None
    reporter_id: Optional[int] = None


class StudentUpdate(BaseModel):
    """Schéma de mise à jour (PUT /students/{id}) : seuls le nom et l'email sont modifiables."""
    name: Optional[str] = None
    email: Optional[str] = None


class StudentStatusUpdate(BaseModel):
    """
    Corps de PATCH /students/{id}/status.
    Type volontairement permissif : le router renvoie un 400 explicite si ce n'est pas un booléen.
    """
    is_active: Any = None


# --- Réponses ---

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StudentListItem(CamelModel):
    id: int
    name: str
    email: str
    last_login: Optional[datetime] = None
    system_access: Optional[bool] = None
    class_: Optional[str] = Field(default=None, alias="class")
    section: Optional[str] = None
    roll: Optional[int] = None


class StudentDetail(StudentListItem):
    phone: Optional[str] = None
    gender: Optional[str] = None
    dob: Optional[date] = None
    father_name: Optional[str] = None
    father_phone: Optional[str] = None
    mother_name: Optional[str] = None
    mother_phone: Optional[str] = None
    guardian_name: Optional[str] = None
    guardian_phone: Optional[str] = None
    relation_of_guardian: Optional[str] = None
    current_address: Optional[str] = None
    permanent_address: Optional[str] = None
    admission_date: Optional[date] = None
    reporter_name: Optional[str] = None


class Pagination(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int


class StudentListResponse(BaseModel):
    success: bool
    data: List[StudentListItem]
    pagination: Pagination


class StudentDetailResponse(BaseModel):
    success: bool
    data: StudentDetail


class StudentCreated(CamelModel):
    user_id: int
    message: Optional[str] = None


class StudentCreateResponse(BaseModel):
    success: bool
    message: str
    data: StudentCreated


class StudentIdentity(BaseModel):
    id: int
    name: str
    email: str


class StudentUpdateResponse(BaseModel):
    success: bool
    message: str
    updated: StudentIdentity


class MessageResponse(BaseModel):
    success: bool
    message: str


# --- Résultat de la routine student_add_update ---

class StudentSaved(BaseModel):
    """La routine a créé (ou mis à jour) le compte et son profil."""
    user_id: int
    message: Optional[str] = None


class StudentSaveFailed(BaseModel):
    """La routine a refusé l'opération ; message renvoyé par la base."""
    message: str


StudentSaveResult = Union[StudentSaved, StudentSaveFailed]
