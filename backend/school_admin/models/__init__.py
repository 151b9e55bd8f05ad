# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles
# (users.role_id → roles.id, user_profiles.user_id → users.id, ...).

from school_admin.models.role import Role  # noqa: F401  — doit précéder user
from school_admin.models.user import User, UserProfile  # noqa: F401
from school_admin.models.email_verification import EmailVerification  # noqa: F401
