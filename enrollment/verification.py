"""
Verification state machine for uploaded documents.

    PENDING ──approve──────────▶ APPROVED        (terminal)
    PENDING ──request_revision─▶ NEEDS_REVISION  (re-upload replaces the entity)

Staff uploads skip review and start APPROVED. Nothing leaves APPROVED here;
revoking an approval means deleting the document and uploading again.
"""

import logging
from typing import Iterable, List, Optional

from enrollment.audit import build_transition_event, log_transition
from enrollment.errors import StateError, ValidationError
from enrollment.schema import (
    DocumentCategory,
    DocumentEntity,
    DocumentStatus,
    Originator,
    StudentRecord,
    utcnow,
)

logger = logging.getLogger(__name__)


def initial_status(originator: Originator) -> DocumentStatus:
    """Self-service uploads wait for review; staff uploads are trusted."""
    if Originator(originator) == Originator.STAFF:
        return DocumentStatus.APPROVED
    return DocumentStatus.PENDING


def _require_pending(doc: DocumentEntity, action: str) -> None:
    if doc.status != DocumentStatus.PENDING:
        logger.warning(f"Refusing {action} on document {doc.id}: status is {doc.status.value}")
        raise StateError(
            f"Cannot {action} document {doc.id} in status {doc.status.value}",
            current_status=doc.status,
        )


def _require_attached(record: StudentRecord, doc: DocumentEntity) -> None:
    if not any(d.id == doc.id for d in record.documents):
        raise ValidationError(f"Document {doc.id} does not belong to student {record.id}")


def approve(record: StudentRecord, doc: DocumentEntity,
            verifier_name: Optional[str] = None) -> DocumentEntity:
    """
    Mark a pending document as approved.

    Raises:
        ValidationError: if the document is not attached to the record
        StateError: if the document is not PENDING
    """
    _require_attached(record, doc)
    _require_pending(doc, "approve")
    doc.status = DocumentStatus.APPROVED
    doc.reviewer_note = None
    doc.verifier_name = verifier_name
    doc.verification_date = utcnow()
    log_transition(build_transition_event(
        record.id, "document", doc.id, "approve",
        DocumentStatus.PENDING.value, doc.status.value, actor=verifier_name,
    ))
    return doc


def request_revision(record: StudentRecord, doc: DocumentEntity, note: str,
                     verifier_name: Optional[str] = None) -> DocumentEntity:
    """
    Send a pending document back to the student with a reviewer note.

    Raises:
        ValidationError: if the note is blank or the document is not attached to the record
        StateError: if the document is not PENDING
    """
    if not note or not note.strip():
        raise ValidationError("A note is required when requesting a revision")
    _require_attached(record, doc)
    _require_pending(doc, "request revision for")
    doc.status = DocumentStatus.NEEDS_REVISION
    doc.reviewer_note = note.strip()
    doc.verifier_name = verifier_name
    doc.verification_date = utcnow()
    log_transition(build_transition_event(
        record.id, "document", doc.id, "request_revision",
        DocumentStatus.PENDING.value, doc.status.value,
        actor=verifier_name, note=doc.reviewer_note,
    ))
    return doc


def pending_documents(record: StudentRecord,
                      categories: Optional[Iterable[DocumentCategory]] = None) -> List[DocumentEntity]:
    """Documents awaiting review, oldest upload first, optionally limited to some categories."""
    allowed = set(categories) if categories is not None else None
    pending = [
        d for d in record.documents
        if d.status == DocumentStatus.PENDING and (allowed is None or d.category in allowed)
    ]
    return sorted(pending, key=lambda d: d.upload_date)


def next_pending(record: StudentRecord,
                 categories: Optional[Iterable[DocumentCategory]] = None) -> Optional[DocumentEntity]:
    """The document a verifier should look at next, or None when the queue is empty."""
    queue = pending_documents(record, categories)
    return queue[0] if queue else None
