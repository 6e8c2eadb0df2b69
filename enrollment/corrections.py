"""
Correction request ledger.

A student proposes a new value for one field of their record and attaches
evidence (a scan of the birth certificate, household card, ...). An
administrator then approves, which writes the value into the record, or
rejects with a note. Resolved requests stay in the ledger for audit.

Rules:
- Evidence is mandatory.
- At most one PENDING request per field path: a new proposal supersedes it.
- Only PENDING requests can be approved or rejected.
- Approved requests are never removed; they coexist with later proposals.
"""

import logging
from typing import Any, List, Optional

from enrollment import field_paths
from enrollment.audit import build_transition_event, log_transition
from enrollment.errors import StateError, ValidationError
from enrollment.schema import (
    CorrectionRequest,
    Evidence,
    RequestStatus,
    StudentRecord,
    utcnow,
)

logger = logging.getLogger(__name__)

DEFAULT_APPROVAL_NOTE = "Disetujui."


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _normalize_path(field_path: Optional[str]) -> str:
    return (field_path or "").strip()


def _has_attachment(evidence: Optional[Evidence]) -> bool:
    return (
        evidence is not None
        and bool((evidence.location or "").strip())
        and bool((evidence.name or "").strip())
    )


def propose(
    record: StudentRecord,
    field_path: str,
    proposed_value: Any,
    evidence: Optional[Evidence],
    reason: Optional[str] = None,
    label: Optional[str] = None
) -> CorrectionRequest:
    """
    Submit a correction proposal for one field.

    The current value is snapshotted as original_value. Any PENDING request
    for the same field path is dropped before the new one is appended.

    Args:
        record: Student record the correction targets
        field_path: Dot path of the field, e.g. "father.name"
        proposed_value: Value the student wants
        evidence: Supporting attachment (required, with a location and a file name)
        reason: Why the student asks for the change (required, shown to the reviewer)
        label: Human label; defaults to the field's standard label

    Returns:
        The new PENDING CorrectionRequest

    Raises:
        ValidationError: if evidence or reason is missing, or the field path is unknown
    """
    if not _has_attachment(evidence):
        logger.warning(f"Correction for {field_path} on student {record.id} rejected: no evidence")
        raise ValidationError("Supporting evidence is required for a correction request")
    if not reason or not reason.strip():
        logger.warning(f"Correction for {field_path} on student {record.id} rejected: no reason")
        raise ValidationError("A reason is required for a correction request")
    field_path = _normalize_path(field_path)
    spec = field_paths.get_field_spec(field_path)

    request = CorrectionRequest(
        field_path=field_path,
        label=label or spec.label,
        original_value=_as_text(field_paths.get_value(record, field_path)),
        proposed_value=_as_text(proposed_value),
        reason=reason.strip(),
        evidence=evidence,
    )

    superseded = [
        r.id for r in record.correction_requests
        if r.field_path == field_path and r.status == RequestStatus.PENDING
    ]
    record.correction_requests = [
        r for r in record.correction_requests
        if not (r.field_path == field_path and r.status == RequestStatus.PENDING)
    ] + [request]

    log_transition(build_transition_event(
        record.id, "correction_request", request.id, "propose",
        None, request.status.value,
        details={"field_path": field_path, "superseded_ids": superseded},
    ))
    return request


def _require_pending(request: CorrectionRequest, action: str) -> None:
    if request.status != RequestStatus.PENDING:
        logger.warning(f"Refusing {action} on correction {request.id}: status is {request.status.value}")
        raise StateError(
            f"Cannot {action} correction request {request.id} in status {request.status.value}",
            current_status=request.status,
        )


def approve(
    record: StudentRecord,
    request: CorrectionRequest,
    verifier_name: Optional[str] = None,
    note: Optional[str] = None
) -> CorrectionRequest:
    """
    Approve a pending correction and write the proposed value into the record.

    Raises:
        StateError: if the request is not PENDING
    """
    _require_pending(request, "approve")
    # Raises on an unknown path before anything is written
    field_paths.set_value(record, request.field_path, request.proposed_value)

    request.status = RequestStatus.APPROVED
    request.processed_date = utcnow()
    request.verifier_name = verifier_name
    request.reviewer_note = (note or "").strip() or DEFAULT_APPROVAL_NOTE
    log_transition(build_transition_event(
        record.id, "correction_request", request.id, "approve",
        RequestStatus.PENDING.value, request.status.value,
        actor=verifier_name, note=request.reviewer_note,
        details={"field_path": request.field_path},
    ))
    return request


def reject(
    record: StudentRecord,
    request: CorrectionRequest,
    note: str,
    verifier_name: Optional[str] = None
) -> CorrectionRequest:
    """
    Reject a pending correction. The record itself is not touched.

    Raises:
        ValidationError: if the note is blank
        StateError: if the request is not PENDING
    """
    if not note or not note.strip():
        raise ValidationError("A note is required when rejecting a correction request")
    _require_pending(request, "reject")

    request.status = RequestStatus.REJECTED
    request.processed_date = utcnow()
    request.verifier_name = verifier_name
    request.reviewer_note = note.strip()
    log_transition(build_transition_event(
        record.id, "correction_request", request.id, "reject",
        RequestStatus.PENDING.value, request.status.value,
        actor=verifier_name, note=request.reviewer_note,
        details={"field_path": request.field_path},
    ))
    return request


def find_pending(record: StudentRecord, field_path: str) -> Optional[CorrectionRequest]:
    field_path = _normalize_path(field_path)
    return next(
        (r for r in record.correction_requests
         if r.field_path == field_path and r.status == RequestStatus.PENDING),
        None,
    )


def find_approved(record: StudentRecord, field_path: str) -> Optional[CorrectionRequest]:
    """Most recently approved request for a field, or None."""
    field_path = _normalize_path(field_path)
    approved = [
        r for r in record.correction_requests
        if r.field_path == field_path and r.status == RequestStatus.APPROVED
    ]
    if not approved:
        return None
    return max(approved, key=lambda r: r.processed_date or r.request_date)


def find_by_id(record: StudentRecord, request_id: str) -> Optional[CorrectionRequest]:
    return next((r for r in record.correction_requests if r.id == request_id), None)


def sorted_requests(record: StudentRecord) -> List[CorrectionRequest]:
    """Pending requests first, then everything else; newest first within each group."""
    newest_first = sorted(record.correction_requests, key=lambda r: r.request_date, reverse=True)
    return sorted(newest_first, key=lambda r: r.status != RequestStatus.PENDING)


def pending_count(record: StudentRecord) -> int:
    return sum(1 for r in record.correction_requests if r.status == RequestStatus.PENDING)
