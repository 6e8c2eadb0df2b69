"""
Structured audit events for workflow transitions.
Each event follows Input → Rule → Outcome so a reviewer can reconstruct
who moved which entity from which status to which, and why.
"""

import logging
from typing import Any, Dict, Optional

from enrollment.schema import utcnow

logger = logging.getLogger(__name__)


def build_transition_event(
    student_id: str,
    entity_type: str,
    entity_id: str,
    action: str,
    from_status: Optional[str],
    to_status: Optional[str],
    actor: Optional[str] = None,
    note: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Build a structured transition event.

    Args:
        student_id: Record the entity belongs to
        entity_type: "document", "correction_request" or "notification"
        entity_id: Id of the entity that changed
        action: Operation name (upload, approve, request_revision, propose, reject, ...)
        from_status: Status before the transition (None for creation)
        to_status: Status after the transition (None for removal)
        actor: Verifier or uploader name, if known
        note: Reviewer note, if any
        details: Extra operation-specific data (field path, slot, replaced id)

    Returns:
        Dictionary with input, rule and outcome sections
    """
    return {
        "input": {
            "student_id": student_id,
            "entity_type": entity_type,
            "entity_id": entity_id,
            "actor": actor,
            "timestamp": utcnow().isoformat(),
        },
        "rule": {
            "action": action,
            "from_status": from_status,
            "to_status": to_status,
        },
        "outcome": {
            "note": note,
            "details": details or {},
        },
    }


def log_transition(event: Dict[str, Any]) -> Dict[str, Any]:
    """Emit an event to the audit logger and hand it back to the caller."""
    rule = event["rule"]
    logger.info(
        "%s %s %s: %s -> %s",
        event["input"]["entity_type"],
        event["input"]["entity_id"],
        rule["action"],
        rule["from_status"],
        rule["to_status"],
        extra={"audit_event": event},
    )
    return event
