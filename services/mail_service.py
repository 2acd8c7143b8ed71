"""
Mail Service
Emails a filled timesheet to its learner over SMTP
"""
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import formataddr
from pathlib import Path

from flask import current_app

from services.errors import MailError


PLAIN_BODY = (
    'Please find your pre-filled timesheet attached. You can open it in any '
    'PDF reader and fill in the remaining fields digitally.'
)

HTML_BODY = """\
<html>
  <body style="font-family: Arial, Helvetica, sans-serif; color: #333333; background-color: #f5f7fa; padding: 24px;">
    <div style="max-width: 560px; margin: 0 auto; background: #ffffff; border-radius: 8px; padding: 24px; border-top: 4px solid #2b6cb0;">
      <h2 style="color: #2b6cb0; margin-top: 0;">Your {month} Timesheet</h2>
      <p>Hi {name},</p>
      <p>Please find your pre-filled timesheet for <strong>{month} {year}</strong> attached.</p>
      <p>You can open it in any PDF reader and fill in the remaining fields digitally.</p>
      <p style="font-size: 12px; color: #888888; margin-bottom: 0;">This message was sent automatically by {sender_name}.</p>
    </div>
  </body>
</html>
"""


@dataclass(frozen=True)
class MailSettings:
    """SMTP settings, taken from app config at call time"""
    server: str
    port: int = 587
    use_tls: bool = True
    use_ssl: bool = False
    username: str = ''
    password: str = ''
    sender: str = ''
    sender_name: str = 'Timesheet Bot'
    suppress_send: bool = False
    timeout: int = 30

    @classmethod
    def from_config(cls, config):
        return cls(
            server=config.get('MAIL_SERVER', 'localhost'),
            port=int(config.get('MAIL_PORT', 587)),
            use_tls=bool(config.get('MAIL_USE_TLS', True)),
            use_ssl=bool(config.get('MAIL_USE_SSL', False)),
            username=config.get('MAIL_USERNAME') or '',
            password=config.get('MAIL_PASSWORD') or '',
            sender=config.get('MAIL_DEFAULT_SENDER') or config.get('MAIL_USERNAME') or '',
            sender_name=config.get('MAIL_SENDER_NAME', 'Timesheet Bot'),
            suppress_send=bool(config.get('MAIL_SUPPRESS_SEND', False)),
            timeout=int(config.get('MAIL_TIMEOUT', 30)),
        )


class MailService:
    """Service for composing and sending timesheet emails"""

    @staticmethod
    def build_message(settings, recipient, attachment_path, month, learner_name='', year=None):
        attachment_path = Path(attachment_path)
        message = EmailMessage()
        message['Subject'] = f'Your {month} Fillable Timesheet'
        message['From'] = formataddr((settings.sender_name, settings.sender))
        message['To'] = recipient
        message.set_content(PLAIN_BODY)
        message.add_alternative(
            HTML_BODY.format(
                month=month,
                year=year or '',
                name=learner_name or 'there',
                sender_name=settings.sender_name,
            ),
            subtype='html',
        )
        message.add_attachment(
            attachment_path.read_bytes(),
            maintype='application',
            subtype='pdf',
            filename=attachment_path.name,
        )
        return message

    @staticmethod
    def send_message(settings, message):
        """Deliver ``message`` through the configured SMTP server"""
        if settings.use_ssl:
            smtp = smtplib.SMTP_SSL(
                settings.server, settings.port,
                timeout=settings.timeout, context=ssl.create_default_context(),
            )
        else:
            smtp = smtplib.SMTP(settings.server, settings.port, timeout=settings.timeout)

        with smtp:
            if settings.use_tls and not settings.use_ssl:
                smtp.starttls(context=ssl.create_default_context())
            if settings.username:
                smtp.login(settings.username, settings.password)
            smtp.send_message(message)

    @staticmethod
    def send_timesheet(settings, recipient, attachment_path, month, learner_name='', year=None):
        """
        Email a filled timesheet as a PDF attachment.

        Returns:
            True if the message was handed to the SMTP server, False if
            sending is suppressed by configuration
        """
        if not recipient:
            raise MailError(f'No email address for {learner_name or "learner"}; cannot send timesheet')

        try:
            message = MailService.build_message(
                settings, recipient, attachment_path, month,
                learner_name=learner_name, year=year,
            )
        except OSError as exc:
            raise MailError(f'Could not attach {attachment_path}: {exc}') from exc

        if settings.suppress_send:
            current_app.logger.info(f'MAIL_SUPPRESS_SEND set; not sending {message["Subject"]!r} to {recipient}')
            return False

        try:
            MailService.send_message(settings, message)
        except (smtplib.SMTPException, OSError) as exc:
            raise MailError(f'Failed to email timesheet to {recipient}: {exc}') from exc

        current_app.logger.info(f'Emailed {Path(attachment_path).name} to {recipient}')
        return True
