"""
Validation des données de création d'un élève, avant tout accès à la base.
"""

import re
from typing import Any

from school_admin.schemas.student import ValidationResult

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def is_valid_name(value: Any) -> bool:
    return isinstance(value, str) and len(value.strip()) > 0


def is_valid_email(value: Any) -> bool:
    return isinstance(value, str) and EMAIL_PATTERN.match(value) is not None


def validate_create_student(name: Any, email: Any) -> ValidationResult:
    """
    Vérifie le nom et l'email d'un nouvel élève.
    Fonction pure : retourne la liste des champs en erreur sans lever d'exception.
    """
    errors = {}

    if not is_valid_name(name):
        errors["name"] = "Name is required"

    if not is_valid_email(email):
        errors["email"] = "Valid email is required"

    return ValidationResult(is_valid=not errors, errors=errors)
