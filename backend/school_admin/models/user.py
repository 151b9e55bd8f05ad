"""
Modèles SQLAlchemy pour les comptes utilisateurs et leur profil.
Un élève est un utilisateur dont le rôle est « student » ; ses informations
scolaires et familiales vivent dans user_profiles (relation 1:1 optionnelle).
"""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, func

from school_admin.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=True)
    is_active = Column(Boolean, default=False)
    last_login = Column(DateTime, nullable=True)
    reporter_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    status_last_reviewed_dt = Column(DateTime, nullable=True)
    status_last_reviewer_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_dt = Column(DateTime, server_default=func.now())
    updated_dt = Column(DateTime, nullable=True)


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    phone = Column(String(20), nullable=True)
    gender = Column(String(10), nullable=True)
    dob = Column(Date, nullable=True)
    class_name = Column(String(50), nullable=True)
    section_name = Column(String(50), nullable=True)
    roll = Column(Integer, nullable=True)
    father_name = Column(String(100), nullable=True)
    father_phone = Column(String(20), nullable=True)
    mother_name = Column(String(100), nullable=True)
    mother_phone = Column(String(20), nullable=True)
    guardian_name = Column(String(100), nullable=True)
    guardian_phone = Column(String(20), nullable=True)
    relation_of_guardian = Column(String(30), nullable=True)
    current_address = Column(String(255), nullable=True)
    permanent_address = Column(String(255), nullable=True)
    admission_dt = Column(Date, nullable=True)
