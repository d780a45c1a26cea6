from fastapi import APIRouter, Depends

from contact_relay.api.deps import get_notifier, get_repository
from contact_relay.core.notifier import Notifier
from contact_relay.db.submissions import SubmissionRepository

router = APIRouter()


@router.get("/health")
def health_check(
    repository: SubmissionRepository = Depends(get_repository),
    notifier: Notifier = Depends(get_notifier),
):
    """
    Health check endpoint.
    Reports which optional integrations are configured, never their values.
    """
    return {
        "status": "ok",
        "storage": repository.is_configured,
        "mail": notifier.is_configured,
    }
