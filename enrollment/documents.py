"""
Document registry: the uploaded files attached to a student.

Every document sits in a slot. For ordinary categories the slot is the
category itself; for RAPOR it is (category, period, page). A slot holds at
most one document, so uploading into an occupied slot replaces the old file.
"""

import logging
from typing import List, Optional

from enrollment.audit import build_transition_event, log_transition
from enrollment.config import Settings, get_settings
from enrollment.errors import StateError, ValidationError
from enrollment.schema import (
    DocumentCategory,
    DocumentEntity,
    DocumentStatus,
    MediaKind,
    Originator,
    ReportSlot,
    StudentRecord,
    UploadedFile,
)
from enrollment.verification import initial_status

logger = logging.getLogger(__name__)


def infer_media_kind(content_type: Optional[str]) -> MediaKind:
    """Anything declared as PDF is a PDF; everything else is treated as an image."""
    if content_type and "pdf" in content_type.lower():
        return MediaKind.PDF
    return MediaKind.IMAGE


def format_size(size_bytes: int) -> str:
    """
    Human-readable size descriptor.

    Examples:
        >>> format_size(524288)
        '512 KB'
        >>> format_size(1310720)
        '1.25 MB'
    """
    if size_bytes >= 1024 * 1024:
        return f"{size_bytes / 1024 / 1024:.2f} MB"
    return f"{size_bytes / 1024:.0f} KB"


def _same_slot(doc: DocumentEntity, category: DocumentCategory, slot: Optional[ReportSlot]) -> bool:
    if doc.category != category:
        return False
    if category != DocumentCategory.RAPOR:
        return True
    return (
        doc.slot is not None
        and slot is not None
        and doc.slot.period == slot.period
        and doc.slot.page == slot.page
    )


def _check_slot(category: DocumentCategory, slot: Optional[ReportSlot], settings: Settings) -> None:
    if category == DocumentCategory.RAPOR:
        if slot is None:
            raise ValidationError("Report card pages need a period and page number")
        if slot.period > settings.period_count:
            raise ValidationError(
                f"Period {slot.period} is outside 1..{settings.period_count}"
            )
        if slot.page > settings.report_pages_per_period:
            raise ValidationError(
                f"Page {slot.page} is outside 1..{settings.report_pages_per_period}"
            )
    elif slot is not None:
        raise ValidationError(f"{category.value} documents do not take a period/page slot")


def upload(
    record: StudentRecord,
    file: UploadedFile,
    category: DocumentCategory,
    slot: Optional[ReportSlot] = None,
    originator: Originator = Originator.SELF,
    uploader_name: Optional[str] = None,
    settings: Optional[Settings] = None
) -> DocumentEntity:
    """
    Attach an uploaded file to the record, replacing whatever occupied its slot.

    The file transfer must already be finished; `file.location` is stored as-is.

    Args:
        record: Student the file belongs to
        file: Completed upload (name, content type, size, location)
        category: Document category
        slot: Period/page sub-key, required for RAPOR and rejected otherwise
        originator: SELF uploads start PENDING, STAFF uploads start APPROVED
        uploader_name: Recorded as verifier for staff uploads
        settings: Overrides environment settings (period range)

    Returns:
        The new DocumentEntity

    Raises:
        ValidationError: if the slot does not fit the category
    """
    settings = settings or get_settings()
    category = DocumentCategory(category)
    _check_slot(category, slot, settings)

    status = initial_status(originator)
    doc = DocumentEntity(
        name=file.name,
        media_kind=infer_media_kind(file.content_type),
        location=file.location,
        category=category,
        size=format_size(file.size_bytes),
        status=status,
        slot=slot,
    )
    if status == DocumentStatus.APPROVED:
        doc.verifier_name = uploader_name
        doc.verification_date = doc.upload_date

    replaced = [d for d in record.documents if _same_slot(d, category, slot)]
    # Remove before inserting so the slot never holds two entities
    record.documents = [d for d in record.documents if not _same_slot(d, category, slot)] + [doc]

    details = {"category": category.value, "replaced_ids": [d.id for d in replaced]}
    if slot is not None:
        details["slot"] = slot.model_dump()
    log_transition(build_transition_event(
        record.id, "document", doc.id, "upload", None, status.value,
        actor=uploader_name, details=details,
    ))
    return doc


def remove(record: StudentRecord, document_id: str, protect_approved: bool = False) -> Optional[DocumentEntity]:
    """
    Delete a document from the record.

    Unknown ids are ignored (delete races from the UI are harmless).

    Args:
        record: Student record
        document_id: Id of the document to delete
        protect_approved: Refuse to delete APPROVED documents

    Returns:
        The removed document, or None if it was not found

    Raises:
        StateError: if protect_approved is set and the document is APPROVED
    """
    target = next((d for d in record.documents if d.id == document_id), None)
    if target is None:
        logger.debug(f"remove: document {document_id} not found on student {record.id}")
        return None
    if protect_approved and target.status == DocumentStatus.APPROVED:
        raise StateError(
            f"Document {document_id} is approved and cannot be deleted",
            current_status=target.status,
        )
    record.documents = [d for d in record.documents if d.id != document_id]
    log_transition(build_transition_event(
        record.id, "document", target.id, "remove", target.status.value, None,
        details={"category": target.category.value},
    ))
    return target


def by_category(documents: List[DocumentEntity], category: DocumentCategory) -> Optional[DocumentEntity]:
    """The document filed under a category, or None."""
    category = DocumentCategory(category)
    return next((d for d in documents if d.category == category), None)


def by_period_and_page(documents: List[DocumentEntity], period: int, page: int) -> Optional[DocumentEntity]:
    """The report card page for a period, or None."""
    return next(
        (
            d for d in documents
            if d.category == DocumentCategory.RAPOR
            and d.slot is not None
            and d.slot.period == period
            and d.slot.page == page
        ),
        None,
    )


def report_pages(documents: List[DocumentEntity], period: int) -> List[DocumentEntity]:
    """All uploaded report card pages for a period, ordered by page number."""
    pages = [
        d for d in documents
        if d.category == DocumentCategory.RAPOR and d.slot is not None and d.slot.period == period
    ]
    return sorted(pages, key=lambda d: d.slot.page)
