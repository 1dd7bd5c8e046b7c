from collections.abc import Awaitable, Callable
from email.message import EmailMessage
from email.utils import make_msgid, parseaddr
from string import Template

import aiosmtplib

from relay.core.errors import ConfigurationError, ValidationError, provider_errors
from relay.shared import Logger
from relay.shared.config import Mail, MailTemplate

logger = Logger(__name__).get_logger()

SendHandler = Callable[..., Awaitable]


def render(template: MailTemplate, variables: dict) -> tuple[str, str]:
    """Fill ``$name`` placeholders; unknown placeholders are left in place."""
    values = {key: str(value) for key, value in variables.items()}
    subject = Template(template.subject).safe_substitute(values)
    body = Template(template.body).safe_substitute(values)
    return subject, body


class Mailer:
    def __init__(self, settings: Mail, send: SendHandler = aiosmtplib.send):
        self.settings = settings
        self._send = send

    def build_message(self, to: str, template_name: str, variables: dict) -> EmailMessage:
        template = self.settings.templates.get(template_name)
        if template is None:
            raise ValidationError(f"Unknown template: {template_name}")

        if not self.settings.sender:
            raise ConfigurationError("MAIL_FROM is not configured")

        subject, body = render(template, variables)

        message = EmailMessage()
        try:
            message["From"] = self.settings.sender
            message["To"] = to
            message["Subject"] = subject
        except ValueError as e:
            raise ValidationError(f"Invalid message header: {e}") from e
        domain = parseaddr(self.settings.sender)[1].rpartition("@")[2]
        message["Message-ID"] = make_msgid(domain=domain or None)
        if template.html:
            message.set_content(body, subtype="html")
        else:
            message.set_content(body)

        return message

    async def send(self, to: str, template_name: str, variables: dict) -> str:
        message = self.build_message(to, template_name, variables)

        if not self.settings.host:
            raise ConfigurationError("SMTP_HOST is not configured")

        with provider_errors("Send email"):
            await self._send(
                message,
                hostname=self.settings.host,
                port=self.settings.port,
                username=self.settings.username or None,
                password=self.settings.password or None,
                use_tls=self.settings.use_tls,
                start_tls=self.settings.start_tls,
            )

        message_id = message["Message-ID"]
        logger.info("Sent %s to %s (%s)", template_name, to, message_id)
        return message_id
