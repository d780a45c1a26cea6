"""
Turns a loosely typed contact form payload into a Submission.

Form clients differ in how they send repeated fields: some post
platform_required[]=web&platform_required[]=mobile, others drop the
brackets, and a single checkbox arrives as a plain string. All of these
end up as an ordered list of strings.
"""

from typing import Any, Dict, List, Mapping, Sequence

from starlette.datastructures import FormData, UploadFile

from contact_relay.models.submission import Attachment, Submission

REQUIRED_FIELDS = ("full_name", "email", "phone")

OPTIONAL_FIELDS = (
    "company",
    "build_type",
    "project_type",
    "industry",
    "timeline",
    "startup_stage",
    "budget",
    "message",
    "mvp_validation",
    "referral_source",
)

MULTI_VALUE_FIELDS = ("platform_required", "mvp_purpose", "discussion_mode")


def form_to_payload(form: FormData) -> Dict[str, Any]:
    """Collapse a multi-dict form into {key: scalar} or {key: [values]}, skipping file parts"""
    payload = {}
    for key in form.keys():
        values = [value for value in form.getlist(key) if not isinstance(value, UploadFile)]
        if not values:
            continue
        payload[key] = values[0] if len(values) == 1 else values
    return payload


def coerce_list(value: Any) -> List[str]:
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def candidate_keys(name: str) -> Sequence[str]:
    return (f"{name}[]", name)


def resolve_multi_value(payload: Mapping[str, Any], name: str) -> List[str]:
    """Look up name[] first, then name, and return the first non-empty one as a list"""
    for key in candidate_keys(name):
        value = payload.get(key)
        if value:
            return coerce_list(value)
    return []


def _is_empty(value: Any) -> bool:
    return not isinstance(value, str) or value == ""


def missing_required(payload: Mapping[str, Any]) -> List[str]:
    return [field for field in REQUIRED_FIELDS if _is_empty(payload.get(field))]


def build_submission(payload: Mapping[str, Any], attachments: List[Attachment], created_at: str) -> Submission:
    """
    Build the canonical record.
    Callers must check missing_required() first; required fields are passed
    through as received.
    """
    fields = {field: payload[field] for field in REQUIRED_FIELDS}
    for field in OPTIONAL_FIELDS:
        value = payload.get(field)
        fields[field] = value if isinstance(value, str) else ""
    for field in MULTI_VALUE_FIELDS:
        fields[field] = resolve_multi_value(payload, field)

    return Submission(created_at=created_at, attachments=attachments, **fields)
