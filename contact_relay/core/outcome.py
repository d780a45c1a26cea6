"""
Result of an optional integration step (persistence, mail).

A step that is not configured is not a failure: it returns NOT_CONFIGURED
and the request carries on. Real failures are raised as exceptions.
"""

from enum import Enum


class Outcome(str, Enum):
    DONE = "done"
    NOT_CONFIGURED = "not_configured"
