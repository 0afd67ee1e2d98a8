"""Best-effort email notifications. Nothing in here raises to the caller."""

from __future__ import annotations

import html
import logging
import smtplib
from email.message import EmailMessage

from app.core.config import settings
from app.services.ranking import RankingChangeEvent

log = logging.getLogger(__name__)

_STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background-color: #2563eb; color: white; padding: 20px; text-align: center; }
    .content { background-color: #f9fafb; padding: 30px; }
    .rank-box { background-color: white; border: 2px solid #2563eb; border-radius: 10px; padding: 20px; text-align: center; margin: 20px 0; }
    .rank-number { font-size: 48px; font-weight: bold; color: #2563eb; }
    .button { display: inline-block; padding: 12px 24px; background-color: #2563eb; color: white; text-decoration: none; border-radius: 5px; }
    .footer { text-align: center; padding: 20px; color: #666; font-size: 12px; }
"""


def _layout(body: str, user_email: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head>
  <style>{_STYLE}</style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1>eduIA-CIEL</h1>
    </div>
    <div class="content">
{body}
    </div>
    <div class="footer">
      <p>eduIA-CIEL - Plateforme Éducative IA pour BTS CIEL</p>
      <p>Email: {html.escape(user_email)}</p>
    </div>
  </div>
</body>
</html>
"""


def account_validation_email(user_name: str, user_email: str) -> tuple[str, str]:
    body = f"""      <h2>Compte Validé!</h2>
      <p>Bonjour {html.escape(user_name)},</p>
      <p>Votre compte eduIA-CIEL a été validé avec succès!</p>
      <p>Vous pouvez maintenant accéder à toutes les fonctionnalités de la plateforme:</p>
      <ul>
        <li>Évaluations interactives</li>
        <li>Chat IA</li>
        <li>Quiz personnalisés</li>
        <li>Classement et compétitions</li>
      </ul>
      <p style="text-align: center; margin: 30px 0;">
        <a href="http://{settings.server_domain}/login" class="button">Se Connecter</a>
      </p>
      <p>Bon apprentissage!</p>"""
    return "Votre compte eduIA-CIEL a été validé!", _layout(body, user_email)


def ranking_change_email(event: RankingChangeEvent) -> tuple[str, str]:
    improved = event.new_rank < event.old_rank
    category = html.escape(event.category)
    if improved:
        trend = f"↑ Progression depuis la position #{event.old_rank}"
        closing = "Félicitations pour votre progression! Continuez vos efforts."
    else:
        trend = f"Depuis la position #{event.old_rank}"
        closing = "Continuez à participer aux évaluations pour améliorer votre classement."
    body = f"""      <h2>Changement de Classement</h2>
      <p>Bonjour {html.escape(event.user_name)},</p>
      <p>Votre position dans le classement <strong>{category}</strong> a changé!</p>
      <div class="rank-box">
        <div style="margin-bottom: 10px;">Position</div>
        <div class="rank-number">#{event.new_rank}</div>
        <div style="margin-top: 10px; color: {'#059669' if improved else '#6b7280'};">{trend}</div>
        <div style="margin-top: 15px; font-size: 18px;"><strong>{event.total_score} points</strong></div>
      </div>
      <p>{closing}</p>
      <p style="text-align: center; margin: 30px 0;">
        <a href="http://{settings.server_domain}/leaderboard" class="button">Voir le Classement</a>
      </p>"""
    return f"Changement de classement - {event.category}", _layout(body, event.user_email)


def send_email(to_email: str, subject: str, html_body: str) -> bool:
    if not settings.smtp_enabled:
        log.info("smtp disabled, email not sent to=%s subject=%s", to_email, subject)
        return True

    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = settings.from_email
    msg["To"] = to_email
    msg.set_content("Ce message nécessite un client email compatible HTML.")
    msg.add_alternative(html_body, subtype="html")

    try:
        with smtplib.SMTP(settings.smtp_host, int(settings.smtp_port), timeout=10) as smtp:
            smtp.starttls()
            if settings.smtp_user:
                smtp.login(settings.smtp_user, settings.smtp_pass)
            smtp.send_message(msg)
    except (smtplib.SMTPException, OSError):
        log.exception("email send failed to=%s subject=%s", to_email, subject)
        return False

    log.info("email sent to=%s subject=%s", to_email, subject)
    return True


def notify_ranking_change(event: RankingChangeEvent) -> None:
    subject, body = ranking_change_email(event)
    send_email(event.user_email, subject, body)


def notify_account_validated(user_name: str, user_email: str) -> None:
    subject, body = account_validation_email(user_name, user_email)
    send_email(user_email, subject, body)
