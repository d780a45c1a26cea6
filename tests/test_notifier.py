import pytest

from contact_relay.core.config import Settings
from contact_relay.core.notifier import MailSettings, Notifier, build_message, render_body
from contact_relay.core.outcome import Outcome
from contact_relay.models.submission import Attachment, Submission

MAIL = MailSettings(
    host="smtp.test",
    port=587,
    user="relay",
    password="secret",
    from_email="noreply@business.test",
    to_email="inbox@business.test",
)


def make_submission(**overrides):
    fields = dict(created_at="2026-01-01T00:00:00.000+00:00", full_name="Jane Doe", email="jane@x.com", phone="555-1234")
    fields.update(overrides)
    return Submission(**fields)


def test_render_body_uses_dash_for_empty_values():
    body = render_body(make_submission(company="  "))

    assert body.splitlines() == [
        "Full Name: Jane Doe",
        "Email: jane@x.com",
        "Phone: 555-1234",
        "Company: -",
        "Build Type: -",
        "Project Type: -",
        "Industry: -",
        "Platform Required: -",
        "Timeline: -",
        "Startup Stage: -",
        "Budget: -",
        "MVP Validation: -",
        "MVP Purpose: -",
        "Discussion Mode: -",
        "Referral Source: -",
        "",
        "Message:",
        "-",
    ]


def test_render_body_joins_multi_value_fields():
    body = render_body(make_submission(platform_required=["web", "mobile"], message="Hello\nthere"))

    assert "Platform Required: web, mobile" in body.splitlines()
    assert body.endswith("Message:\nHello\nthere")


def test_build_message_sets_headers_and_attachments(tmp_path):
    stored = tmp_path / "1700000000000-brief.txt"
    stored.write_bytes(b"project brief")
    submission = make_submission(attachments=[
        Attachment(originalname="brief.txt", filename=stored.name, path=str(stored), mimetype="text/plain", size=13),
    ])

    msg = build_message(submission, MAIL)

    assert msg["Subject"] == "New Inquiry - Jane Doe"
    assert msg["From"] == "noreply@business.test"
    assert msg["To"] == "inbox@business.test"
    assert msg["Reply-To"] == "jane@x.com"
    parts = list(msg.iter_attachments())
    assert [part.get_filename() for part in parts] == ["brief.txt"]
    assert parts[0].get_content_type() == "text/plain"
    assert parts[0].get_payload(decode=True) == b"project brief"


def test_mail_settings_require_every_credential():
    assert MAIL.is_complete
    assert not MailSettings(host="smtp.test", user="relay", password="secret", from_email="a@b.test").is_complete


def test_mail_settings_from_settings():
    settings = Settings(_env_file=None, smtp_host="smtp.test", smtp_port=465, smtp_secure=True, smtp_user="u",
                        smtp_pass="p", to_email="to@b.test", from_email="from@b.test")

    mail = MailSettings.from_settings(settings)

    assert mail == MailSettings(host="smtp.test", port=465, secure=True, user="u", password="p",
                                from_email="from@b.test", to_email="to@b.test")


@pytest.mark.asyncio
async def test_send_skips_when_not_configured(smtp_server):
    outcome = await Notifier(MailSettings()).send(make_submission())

    assert outcome == Outcome.NOT_CONFIGURED
    assert smtp_server.sessions == []


@pytest.mark.asyncio
async def test_send_uses_starttls_and_login(smtp_server):
    outcome = await Notifier(MAIL).send(make_submission())

    assert outcome == Outcome.DONE
    [session] = smtp_server.sessions
    assert (session.host, session.port, session.ssl) == ("smtp.test", 587, False)
    assert session.starttls
    assert session.login == ("relay", "secret")
    assert session.messages[0]["Subject"] == "New Inquiry - Jane Doe"


@pytest.mark.asyncio
async def test_send_uses_ssl_when_secure(smtp_server):
    mail = MailSettings(**{**MAIL.__dict__, "port": 465, "secure": True})

    await Notifier(mail).send(make_submission())

    [session] = smtp_server.sessions
    assert session.ssl
    assert not session.starttls


def test_build_message_folds_line_breaks_in_headers():
    msg = build_message(make_submission(full_name="Jane\r\nDoe", email=" jane@x.com\n"), MAIL)

    assert msg["Subject"] == "New Inquiry - Jane Doe"
    assert msg["Reply-To"] == "jane@x.com"
    assert "Full Name: Jane\r\nDoe" in render_body(make_submission(full_name="Jane\r\nDoe"))
