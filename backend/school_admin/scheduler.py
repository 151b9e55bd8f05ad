"""
Planificateur APScheduler : purge horaire des jetons de vérification d'email expirés.
"""

import logging

from apscheduler.schedulers.background import BackgroundScheduler

from school_admin.database import SessionLocal

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def _purge_expired_verifications_scheduled() -> None:
    """
    Tâche planifiée : supprime les jetons de vérification expirés.
    Import local pour éviter les imports circulaires.
    """
    from school_admin.services.verification_service import purge_expired_verifications

    db = SessionLocal()
    try:
        purge_expired_verifications(db)
    except Exception as exc:
        logger.error("Erreur lors de la purge des jetons de vérification : %s", exc)
    finally:
        db.close()


def start_scheduler() -> None:
    """Démarre le planificateur en arrière-plan (appelé au démarrage de l'API)."""
    scheduler.add_job(
        _purge_expired_verifications_scheduled,
        trigger="interval",
        hours=1,
        id="email_verification_purge",
        replace_existing=True,
    )
    scheduler.start()
    logger.info("Scheduler démarré, purge des jetons de vérification toutes les heures.")


def stop_scheduler() -> None:
    """Arrête le planificateur proprement (appelé à l'arrêt de l'API)."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler arrêté.")
