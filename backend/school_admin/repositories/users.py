"""
Accès partagé aux comptes utilisateurs, tous rôles confondus.
"""

from typing import Optional

from sqlalchemy.orm import Session

from school_admin.models.user import User


def find_user_by_id(db: Session, user_id: int) -> Optional[User]:
    """Retourne l'utilisateur d'ID donné, ou None s'il n'existe pas."""
    return db.get(User, user_id)
