"""
Jetons de vérification d'email envoyés à la création d'un compte élève.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, func

from school_admin.database import Base


class EmailVerification(Base):
    __tablename__ = "user_email_verifications"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    token = Column(String(64), unique=True, nullable=False)
    expires_at = Column(DateTime, nullable=False)
    created_dt = Column(DateTime, server_default=func.now())
