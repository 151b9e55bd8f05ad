"""
Service d'envoi d'emails SMTP.
Utilisé pour l'email de vérification envoyé à chaque nouvel élève.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from sqlalchemy.orm import Session

from school_admin.config import settings
from school_admin.services.verification_service import build_verification_link, create_verification

logger = logging.getLogger(__name__)


def _send(msg: MIMEMultipart) -> None:
    with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT) as server:
        if settings.SMTP_USE_TLS:
            server.starttls()
        if settings.SMTP_USERNAME:
            server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        server.send_message(msg)


def send_account_verification_email(db: Session, user_id: int, user_email: str) -> None:
    """
    Crée un jeton de vérification et envoie le lien correspondant à l'élève.
    Le jeton est commité avant l'envoi : un lien reçu pointe toujours vers un jeton existant.
    En cas d'échec SMTP, le jeton inutilisé est supprimé par la purge des jetons expirés.
    Lève une exception en cas d'échec SMTP.
    """
    verification = create_verification(db, user_id)
    link = build_verification_link(verification.token)
    db.commit()

    msg = MIMEMultipart("alternative")
    msg["From"] = settings.SMTP_FROM
    msg["To"] = user_email
    msg["Subject"] = "Verify your school account"

    text_content = (
        "Your student account has been created.\n"
        f"Please verify your email address by opening this link: {link}\n"
        f"The link expires in {settings.EMAIL_VERIFICATION_TTL_HOURS} hours."
    )
    html_content = f"""
    <html>
      <body style="font-family: Arial, sans-serif; color: #333; max-width: 600px; margin: auto;">
        <h2 style="color: #1a73e8;">Welcome!</h2>
        <p>Your student account has been created.</p>
        <p>Please verify your email address to activate it:</p>
        <p style="text-align: center; margin: 24px 0;">
          <a href="{link}" style="background: #1a73e8; color: #fff; padding: 10px 18px;
             text-decoration: none; border-radius: 4px;">Verify email</a>
        </p>
        <p style="font-size: 12px; color: #888;">
          This link expires in {settings.EMAIL_VERIFICATION_TTL_HOURS} hours.
          If you did not expect this email, you can ignore it.
        </p>
      </body>
    </html>
    """

    msg.attach(MIMEText(text_content, "plain", "utf-8"))
    msg.attach(MIMEText(html_content, "html", "utf-8"))

    _send(msg)

    logger.info("Email de vérification envoyé à %s (utilisateur %s)", user_email, user_id)
