"""이메일 서비스 — 비밀번호 재설정 메일 렌더링 및 발송.

Email Service — Renders and sends the password reset email.
Sending is best-effort: missing SMTP credentials skip the send with a
warning, and delivery failures are logged by the caller without changing
the forgot-password response.
"""

import logging
from html import escape

from app.config import Settings
from app.utils.email import send_email, smtp_configured

logger = logging.getLogger(__name__)

RESET_SUBJECT: str = "Recuperacao de Senha - MyPila"

_RESET_TEMPLATE: str = """<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <style>
        body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; }}
        .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
        .header {{ background: #0d9488; color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }}
        .content {{ background: #f9fafb; padding: 30px; border-radius: 0 0 10px 10px; }}
        .button {{ display: inline-block; background: #0d9488; color: white; padding: 15px 30px; text-decoration: none; border-radius: 8px; font-weight: bold; margin: 20px 0; }}
        .footer {{ text-align: center; margin-top: 20px; color: #666; font-size: 12px; }}
        .warning {{ background: #fef3c7; border-left: 4px solid #f59e0b; padding: 15px; margin: 20px 0; border-radius: 4px; }}
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>MyPila</h1>
            <p>Recuperacao de Senha</p>
        </div>
        <div class="content">
            <h2>Ola, {name}!</h2>
            <p>Recebemos uma solicitacao para redefinir a senha da sua conta.</p>
            <p>Clique no botao abaixo para criar uma nova senha:</p>
            <p style="text-align: center;">
                <a href="{link}" class="button">Redefinir Senha</a>
            </p>
            <div class="warning">
                <strong>Importante:</strong> Este link expira em {minutes} minutos. Se voce nao solicitou a recuperacao de senha, ignore este email.
            </div>
            <p>Se o botao nao funcionar, copie e cole o link abaixo no seu navegador:</p>
            <p style="word-break: break-all; color: #0d9488;">{link}</p>
        </div>
        <div class="footer">
            <p>Este email foi enviado automaticamente. Por favor, nao responda.</p>
            <p>MyPila - Gestao Financeira</p>
        </div>
    </div>
</body>
</html>"""


class EmailService:
    """이메일 발송 서비스.

    Email delivery service built once with the application settings.
    """

    def __init__(self, settings: Settings) -> None:
        self.settings: Settings = settings

    def reset_link(self, token: str) -> str:
        """재설정 링크 — ``{FRONTEND_URL}/reset-password?token=<token>``."""
        return f"{self.settings.FRONTEND_URL.rstrip('/')}/reset-password?token={token}"

    def render_password_reset(self, name: str, token: str) -> str:
        """비밀번호 재설정 메일 HTML을 생성합니다.

        Render the HTML body of the password reset email.
        """
        return _RESET_TEMPLATE.format(
            name=escape(name),
            link=escape(self.reset_link(token)),
            minutes=self.settings.PASSWORD_RESET_EXPIRE_MINUTES,
        )

    async def send_password_reset(self, to: str, name: str, token: str) -> bool:
        """비밀번호 재설정 메일을 발송합니다.

        Send the password reset email.

        Args:
            to: 수신자 이메일 (Recipient email)
            name: 수신자 이름 (Recipient display name)
            token: 평문 재설정 토큰 (Plaintext reset token)

        Returns:
            bool: 발송 시도 여부 — SMTP 미설정이면 False
                  (False when SMTP is not configured and the send was skipped)
        """
        if not smtp_configured(self.settings):
            logger.warning("SMTP credentials not configured; password reset email to %s not sent", to)
            return False

        await send_email(self.settings, to, RESET_SUBJECT, self.render_password_reset(name, token))
        logger.info("Password reset email sent to %s", to)
        return True
