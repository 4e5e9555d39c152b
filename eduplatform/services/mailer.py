from __future__ import annotations

import logging
from typing import Protocol

import requests

from eduplatform.core.config import settings

log = logging.getLogger("eduplatform.mailer")

_HTML_ESCAPES = str.maketrans({"&": "&amp;", "<": "&lt;", ">": "&gt;", '"': "&quot;"})


class Mailer(Protocol):
    def send_password_reset_code(self, *, to_email: str, code: str, user_name: str) -> bool:
        ...


def escape_html(value: str | None) -> str:
    if value is None:
        return ""
    return value.translate(_HTML_ESCAPES)


def password_reset_subject(app_name: str | None = None) -> str:
    return f"Your {app_name or settings.APP_NAME} Password Reset Code"


def render_password_reset_html(
    *, code: str, user_name: str | None, app_name: str | None = None, expires_min: int | None = None
) -> str:
    app_name = app_name or settings.APP_NAME
    if expires_min is None:
        expires_min = settings.PASSWORD_RESET_CODE_MINUTES
    # inline styles only; most mail clients drop <style> blocks
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 500px; margin: 0 auto; padding: 20px;">'
        '<div style="text-align: center; padding: 20px 0;">'
        f'<h2 style="color: #3b82f6; margin: 0;">{app_name}</h2>'
        "</div>"
        '<div style="background: #f8fafc; border-radius: 8px; padding: 30px; text-align: center;">'
        '<h3 style="margin-top: 0;">Password Reset Request</h3>'
        f"<p>Hi {escape_html(user_name)},</p>"
        "<p>You requested a password reset. Use the code below to verify your identity:</p>"
        '<div style="background: #ffffff; border: 2px dashed #3b82f6; border-radius: 8px; '
        'padding: 20px; margin: 20px 0;">'
        '<span style="font-size: 32px; font-weight: bold; letter-spacing: 8px; color: #1e293b;">'
        f"{code}</span>"
        "</div>"
        f'<p style="color: #64748b; font-size: 14px;">This code expires in {expires_min} minutes.</p>'
        '<p style="color: #64748b; font-size: 14px;">'
        "If you didn't request this, you can safely ignore this email.</p>"
        "</div>"
        "</div>"
    )


def render_password_reset_text(
    *, code: str, user_name: str | None, app_name: str | None = None, expires_min: int | None = None
) -> str:
    app_name = app_name or settings.APP_NAME
    if expires_min is None:
        expires_min = settings.PASSWORD_RESET_CODE_MINUTES
    return (
        f"Hi {user_name or ''},\n\n"
        f"You requested a password reset for your {app_name} account.\n\n"
        f"Your verification code is: {code}\n\n"
        f"This code expires in {expires_min} minutes.\n\n"
        "If you didn't request this, you can safely ignore this email.\n\n"
        f"- {app_name} Team"
    )


class HttpMailer:
    """
    Posts password-reset mail to the internal email relay (EMAIL_SERVICE_URL).

    Delivery is best effort: one POST, no retry. When the relay is missing or
    fails, the code is written to the log so an operator can still hand it out.
    """

    def __init__(
        self,
        service_url: str | None = None,
        *,
        connect_timeout: float | None = None,
        read_timeout: float | None = None,
    ) -> None:
        self._service_url = service_url if service_url is not None else settings.EMAIL_SERVICE_URL
        self._timeout = (
            connect_timeout if connect_timeout is not None else settings.EMAIL_CONNECT_TIMEOUT_SEC,
            read_timeout if read_timeout is not None else settings.EMAIL_READ_TIMEOUT_SEC,
        )

    @property
    def configured(self) -> bool:
        return bool(self._service_url)

    def send_password_reset_code(self, *, to_email: str, code: str, user_name: str) -> bool:
        if not self.configured:
            log.warning(
                f"EMAIL_SERVICE_URL not configured. Password reset code for {to_email}: {code}",
                extra={"to": to_email},
            )
            return False

        try:
            payload = {
                "to": to_email,
                "subject": password_reset_subject(),
                "text": render_password_reset_text(code=code, user_name=user_name),
                "html": render_password_reset_html(code=code, user_name=user_name),
            }
            resp = requests.post(
                self._service_url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
        except Exception as e:
            log.error(f"Failed to send email to {to_email}: {e}", extra={"to": to_email})
            self._log_fallback(to_email, code)
            return False

        if resp.status_code == 200:
            log.info(f"Password reset email sent to {to_email}", extra={"to": to_email})
            return True

        log.error(
            f"Email service returned status {resp.status_code} for {to_email}",
            extra={"to": to_email, "status": resp.status_code},
        )
        self._log_fallback(to_email, code)
        return False

    @staticmethod
    def _log_fallback(to_email: str, code: str) -> None:
        log.warning(f"FALLBACK: Password reset code for {to_email}: {code}", extra={"to": to_email})


_mailer: HttpMailer | None = None


def get_mailer() -> HttpMailer:
    global _mailer
    if _mailer is None:
        _mailer = HttpMailer()
    return _mailer
