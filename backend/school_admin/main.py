"""
Point d'entrée principal de l'API de gestion des élèves.
Démarrage : uvicorn school_admin.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import school_admin.models  # noqa: F401 — enregistre tous les modèles dans Base.metadata avant les routers
from school_admin.exceptions import ApiError
from school_admin.routers import students
from school_admin.scheduler import start_scheduler, stop_scheduler

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Cycle de vie de l'application : démarre et arrête le scheduler APScheduler."""
    start_scheduler()
    yield
    stop_scheduler()


app = FastAPI(
    title="School Admin Students API",
    description="Gestion des comptes élèves : recherche, fiche, création, statut, suppression",
    version="0.1.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS — autorise tous les ports localhost en développement (à restreindre en production).
app.add_middleware(
    CORSMiddleware,
    allow_origins=[],
    allow_origin_regex=r"https?://(localhost|127\.0\.0\.1)(:\d+)?",
    allow_credentials=False,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


app.include_router(students.router)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Convertit les erreurs métier en réponse {success: false, message[, errors]}."""
    if exc.status_code >= 500:
        logger.error("%s %s : %s", request.method, request.url.path, exc.message)
    content = {"success": False, "message": exc.message}
    if exc.errors:
        content["errors"] = exc.errors
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Intercepte toutes les exceptions non gérées (erreurs SQL comprises).
    Le message renvoyé reste générique pour ne rien exposer du schéma.
    """
    logger.error("Exception non gérée : %s", exc, exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "An internal error occurred."},
    )


@app.get("/api/health", tags=["Health"])
def health_check():
    """Vérifie que l'API est opérationnelle."""
    return {"status": "ok", "service": "School Admin Students API", "version": "0.1.0"}
