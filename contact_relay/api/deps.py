"""
Request dependencies.
Services are built once at startup and kept on app.state; endpoints get
them through these functions so tests can swap in fakes with
app.dependency_overrides.
"""

from fastapi import Request

from contact_relay.core.attachments import AttachmentStore
from contact_relay.core.notifier import Notifier
from contact_relay.db.submissions import SubmissionRepository


def get_attachment_store(request: Request) -> AttachmentStore:
    return request.app.state.attachment_store


def get_repository(request: Request) -> SubmissionRepository:
    return request.app.state.repository


def get_notifier(request: Request) -> Notifier:
    return request.app.state.notifier
