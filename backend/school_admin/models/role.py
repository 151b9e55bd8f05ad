"""
Modèle SQLAlchemy pour les rôles utilisateur (admin, teacher, student, ...).
"""

from sqlalchemy import Column, Integer, String

from school_admin.database import Base


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True)
    name = Column(String(50), unique=True, nullable=False)
