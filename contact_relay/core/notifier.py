"""
Email notification for new submissions.
Sends a plain-text summary to the business inbox with the submitter as
Reply-To and the uploaded files attached.
"""

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import make_msgid
from pathlib import Path
from typing import List, Optional, Union

from fastapi.concurrency import run_in_threadpool

from contact_relay.core.config import Settings
from contact_relay.core.outcome import Outcome
from contact_relay.models.submission import Submission

# Set up logger
logger = logging.getLogger(__name__)

# (label, field) in the order they appear in the mail body
BODY_FIELDS = [
    ("Full Name", "full_name"),
    ("Email", "email"),
    ("Phone", "phone"),
    ("Company", "company"),
    ("Build Type", "build_type"),
    ("Project Type", "project_type"),
    ("Industry", "industry"),
    ("Platform Required", "platform_required"),
    ("Timeline", "timeline"),
    ("Startup Stage", "startup_stage"),
    ("Budget", "budget"),
    ("MVP Validation", "mvp_validation"),
    ("MVP Purpose", "mvp_purpose"),
    ("Discussion Mode", "discussion_mode"),
    ("Referral Source", "referral_source"),
]


@dataclass
class MailSettings:
    host: Optional[str] = None
    port: int = 587
    secure: bool = False
    user: Optional[str] = None
    password: Optional[str] = None
    from_email: Optional[str] = None
    to_email: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "MailSettings":
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            secure=settings.smtp_secure,
            user=settings.smtp_user,
            password=settings.smtp_pass,
            from_email=settings.from_email,
            to_email=settings.to_email,
        )

    @property
    def is_complete(self) -> bool:
        return all([self.host, self.user, self.password, self.from_email, self.to_email])


def _display(value: Union[str, List[str]]) -> str:
    if isinstance(value, list):
        value = ", ".join(value)
    return value if value and value.strip() else "-"


def _header_value(value: str) -> str:
    """Fold a submitted value onto one line so it can be used in a mail header"""
    return " ".join(line.strip() for line in value.splitlines() if line.strip())


def render_body(submission: Submission) -> str:
    lines = [f"{label}: {_display(getattr(submission, field))}" for label, field in BODY_FIELDS]
    lines += ["", "Message:", _display(submission.message)]
    return "\n".join(lines)


def build_message(submission: Submission, mail: MailSettings) -> EmailMessage:
    msg = EmailMessage()
    msg["Subject"] = f"New Inquiry - {_header_value(submission.full_name)}"
    msg["From"] = mail.from_email
    msg["To"] = mail.to_email
    reply_to = _header_value(submission.email)
    if reply_to:
        msg["Reply-To"] = reply_to
    msg["Message-ID"] = make_msgid(domain=mail.from_email.rpartition("@")[2] or None)
    msg.set_content(render_body(submission))

    for attachment in submission.attachments:
        maintype, _, subtype = attachment.mimetype.partition("/")
        if not maintype or not subtype:
            maintype, subtype = "application", "octet-stream"
        msg.add_attachment(
            Path(attachment.path).read_bytes(),
            maintype=maintype,
            subtype=subtype,
            filename=attachment.originalname,
        )
    return msg


class Notifier:
    def __init__(self, mail: MailSettings):
        self.mail = mail

    @property
    def is_configured(self) -> bool:
        return self.mail.is_complete

    def _deliver(self, msg: EmailMessage) -> dict:
        if self.mail.secure:
            smtp = smtplib.SMTP_SSL(self.mail.host, self.mail.port)
        else:
            smtp = smtplib.SMTP(self.mail.host, self.mail.port)
        with smtp:
            if not self.mail.secure:
                smtp.ehlo()
                if smtp.has_extn("starttls"):
                    smtp.starttls()
                    smtp.ehlo()
            smtp.login(self.mail.user, self.mail.password)
            return smtp.send_message(msg)

    async def send(self, submission: Submission) -> Outcome:
        """
        Email the submission to the configured inbox.
        SMTP errors and unreadable attachments propagate to the caller.
        """
        if not self.is_configured:
            logger.warning("Email not sent: SMTP settings are missing.")
            return Outcome.NOT_CONFIGURED

        msg = await run_in_threadpool(build_message, submission, self.mail)
        refused = await run_in_threadpool(self._deliver, msg)
        logger.info(f"Email sent: message_id={msg['Message-ID']} to={self.mail.to_email} refused={list(refused)}")
        return Outcome.DONE
