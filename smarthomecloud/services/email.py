"""Email service using Resend API."""

from __future__ import annotations

import logging

from smarthomecloud.config import get_settings

logger = logging.getLogger(__name__)

_settings = get_settings()

_BUTTON = "display:inline-block;padding:12px 24px;background:#2563eb;color:#ffffff;text-decoration:none;border-radius:6px;font-weight:600;"


def _send(to: str, subject: str, html: str) -> bool:
    """Send an email via Resend. Returns True on success."""
    if not _settings.resend_api_key:
        logger.warning("RESEND_API_KEY not set, email to %s not sent: %s", to, subject)
        return False

    import resend
    resend.api_key = _settings.resend_api_key

    try:
        resend.Emails.send({
            "from": _settings.email_from,
            "to": [to],
            "subject": subject,
            "html": html,
        })
        return True
    except Exception:
        logger.exception("Failed to send email to %s", to)
        return False


def send_welcome_email(email: str, first_name: str, role: str) -> bool:
    """Tell a staff-created user their account exists."""
    role_label = role.replace("_", " ").title()
    html = f"""
    <h2>Welcome to SmartHomeCloud, {first_name}</h2>
    <p>An account has been created for you with the <strong>{role_label}</strong> role.</p>
    <p><a href="{_settings.app_url}" style="{_BUTTON}">Sign in</a></p>
    <p style="color:#888;font-size:12px;">If you weren't expecting this, contact your SmartHomeCloud administrator.</p>
    """
    return _send(email, "Your SmartHomeCloud account", html)


def send_password_reset_email(email: str, token: str) -> bool:
    """Send a password reset email."""
    url = f"{_settings.app_url}/reset-password/{token}"
    html = f"""
    <h2>Reset your password</h2>
    <p>Click the button below to reset your SmartHomeCloud password.</p>
    <p><a href="{url}" style="{_BUTTON}">Reset Password</a></p>
    <p>This link expires in 1 hour. If you didn't request this, you can ignore this email.</p>
    """
    return _send(email, "Reset your SmartHomeCloud password", html)
