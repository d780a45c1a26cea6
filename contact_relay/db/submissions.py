"""
Submission repository.
Inserts contact form records into the submissions collection. Records are
written once and never updated.
"""

import logging

from contact_relay.core.outcome import Outcome
from contact_relay.models.submission import Submission

# Set up logger
logger = logging.getLogger(__name__)

SUBMISSIONS_COLLECTION = "submissions"


class SubmissionRepository:
    def __init__(self, collection=None):
        self.collection = collection

    @classmethod
    def from_db(cls, db):
        return cls(db[SUBMISSIONS_COLLECTION] if db is not None else None)

    @property
    def is_configured(self) -> bool:
        return self.collection is not None

    async def insert(self, submission: Submission) -> Outcome:
        if self.collection is None:
            logger.warning(f"Submission from {submission.email} not saved: MongoDB is not configured")
            return Outcome.NOT_CONFIGURED

        result = await self.collection.insert_one(submission.dict())
        logger.info(f"✅ Saved submission {result.inserted_id} from {submission.email}")
        return Outcome.DONE
