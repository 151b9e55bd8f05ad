"""
Erreurs métier remontées par les services.
Chaque classe porte le code HTTP sous lequel elle est exposée par l'API ;
la conversion en réponse JSON est faite par le handler déclaré dans main.py.
"""

from typing import Dict, Optional


class ApiError(Exception):
    """Erreur applicative avec code HTTP et message destiné au client."""

    status_code = 500

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        self.message = message
        self.errors = errors
        super().__init__(message)


class BadRequestError(ApiError):
    status_code = 400


class ValidationFailedError(BadRequestError):
    """Corps de requête rejeté par un validateur, avec le détail par champ."""

    def __init__(self, errors: Dict[str, str], message: str = "Validation failed"):
        super().__init__(message, errors=errors)


class NotFoundError(ApiError):
    status_code = 404


class ConflictError(ApiError):
    status_code = 409


class InternalError(ApiError):
    status_code = 500
