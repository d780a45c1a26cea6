"""
Contact form endpoint.
Stores uploaded files, saves the submission and emails it to the inbox.
The client only learns total success or failure, never which step failed.
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import PlainTextResponse
from starlette.datastructures import FormData, UploadFile

from contact_relay.api.deps import get_attachment_store, get_notifier, get_repository
from contact_relay.core.attachments import AttachmentError, AttachmentStore
from contact_relay.core.normalizer import build_submission, form_to_payload, missing_required
from contact_relay.core.notifier import Notifier
from contact_relay.db.submissions import SubmissionRepository

router = APIRouter()
logger = logging.getLogger(__name__)

ATTACHMENTS_FIELD = "attachments"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


def server_error() -> PlainTextResponse:
    return PlainTextResponse("Server error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


async def handle_submission(
    form: FormData,
    attachment_store: AttachmentStore,
    repository: SubmissionRepository,
    notifier: Notifier,
) -> PlainTextResponse:
    uploads = [f for f in form.getlist(ATTACHMENTS_FIELD) if isinstance(f, UploadFile)]
    attachments = await attachment_store.save_all(uploads)

    payload = form_to_payload(form)
    missing = missing_required(payload)
    if missing:
        logger.info(f"Submission rejected, missing fields: {', '.join(missing)}")
        return PlainTextResponse("Missing required fields", status_code=status.HTTP_400_BAD_REQUEST)

    submission = build_submission(payload, attachments, created_at=utc_timestamp())

    saved = await repository.insert(submission)
    sent = await notifier.send(submission)
    logger.info(f"Submission from {submission.email} handled: storage={saved.value} mail={sent.value}")

    return PlainTextResponse("OK")


@router.post("/contact", response_class=PlainTextResponse)
async def submit_contact(
    request: Request,
    attachment_store: AttachmentStore = Depends(get_attachment_store),
    repository: SubmissionRepository = Depends(get_repository),
    notifier: Notifier = Depends(get_notifier),
):
    try:
        form = await request.form()
        try:
            return await handle_submission(form, attachment_store, repository, notifier)
        finally:
            await form.close()

    except AttachmentError as e:
        # Upload limits are reported like any other failure
        logger.warning(f"Upload rejected: {str(e)}")
        return server_error()
    except Exception:
        logger.exception("❌ Error handling contact submission")
        return server_error()
