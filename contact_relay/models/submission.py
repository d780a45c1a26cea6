"""
Submission and Attachment models.
A Submission is one contact form post; its Attachments are embedded in the
stored document and have no lifecycle of their own.
"""

from pydantic import BaseModel, Field
from typing import List


class Attachment(BaseModel):
    """Metadata for one uploaded file stored on disk"""
    originalname: str = Field(..., description="Client supplied filename, untrusted")
    filename: str = Field(..., description="Server generated name: <epoch-ms>-<sanitized name>")
    path: str = Field(..., description="Location of the stored file")
    mimetype: str = "application/octet-stream"
    size: int = 0


class Submission(BaseModel):
    """Canonical contact form record"""
    created_at: str
    full_name: str
    email: str
    phone: str
    company: str = ""
    build_type: str = ""
    project_type: str = ""
    industry: str = ""
    platform_required: List[str] = []
    timeline: str = ""
    startup_stage: str = ""
    budget: str = ""
    message: str = ""
    mvp_validation: str = ""
    mvp_purpose: List[str] = []
    discussion_mode: List[str] = []
    referral_source: str = ""
    attachments: List[Attachment] = []
