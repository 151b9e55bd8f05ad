"""
Jetons de vérification d'email des nouveaux comptes.
"""

import logging
import uuid
from datetime import datetime, timedelta

from sqlalchemy import delete
from sqlalchemy.orm import Session

from school_admin.config import settings
from school_admin.models.email_verification import EmailVerification

logger = logging.getLogger(__name__)


def create_verification(db: Session, user_id: int) -> EmailVerification:
    """
    Ajoute un jeton de vérification à la session (flush, sans commit).
    Le commit est laissé à l'appelant.
    """
    verification = EmailVerification(
        user_id=user_id,
        token=uuid.uuid4().hex,
        expires_at=datetime.now() + timedelta(hours=settings.EMAIL_VERIFICATION_TTL_HOURS),
    )
    db.add(verification)
    db.flush()
    return verification


def build_verification_link(token: str) -> str:
    return f"{settings.UI_URL.rstrip('/')}/auth/verify-email/{token}"


def purge_expired_verifications(db: Session) -> int:
    """Supprime les jetons expirés. Retourne le nombre de lignes supprimées."""
    result = db.execute(
        delete(EmailVerification).where(EmailVerification.expires_at < datetime.now())
    )
    db.commit()
    deleted = result.rowcount or 0
    if deleted:
        logger.info("%d jeton(s) de vérification expiré(s) supprimé(s)", deleted)
    return deleted
