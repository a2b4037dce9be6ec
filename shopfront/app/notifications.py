from __future__ import annotations

import logging

from flask import Blueprint, current_app, render_template
from flask_mail import Message

from shopfront.app.extensions import mail
from shopfront.app.common.auth import current_user
from shopfront.app.common.validation import get_payload

log = logging.getLogger(__name__)

bp = Blueprint("notifications", __name__)


def send_notification(recipient: str, subject: str, body: str) -> Message:
    """Hand a plain-text message to the SMTP transport. No retry, no templating."""
    msg = Message(
        subject=subject or "",
        sender=current_app.config.get("MAIL_DEFAULT_SENDER"),
        recipients=[recipient] if recipient else [],
        body=body or "",
    )
    mail.send(msg)
    return msg


@bp.get("/send-email")
def send_email_form():
    return render_template("user/send_email.html", user=current_user())


@bp.post("/send-email")
def send_email():
    data = get_payload()
    try:
        msg = send_notification(data.get("email"), data.get("subject"), data.get("message"))
    except Exception:
        log.exception("Sending email to %s failed", data.get("email"))
        return "Error sending email", 500

    log.info("Message sent: %s", msg.msgId)
    return "Email sent successfully", 200
