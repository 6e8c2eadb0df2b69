"""
Admin → student message log. Append-only; the only mutation is the read flag.
Delivery (push, SMS, email) is up to the caller after the message is appended.
"""

import logging
from typing import List, Optional

from enrollment.audit import build_transition_event, log_transition
from enrollment.completeness import CompletenessReport
from enrollment.errors import ValidationError
from enrollment.schema import NotificationMessage, StudentRecord

logger = logging.getLogger(__name__)


def notify(record: StudentRecord, content: str) -> NotificationMessage:
    """
    Append a message to the student's log.

    Raises:
        ValidationError: if the content is blank
    """
    if not content or not content.strip():
        raise ValidationError("Notification content cannot be empty")
    message = NotificationMessage(content=content.strip())
    record.admin_messages.append(message)
    log_transition(build_transition_event(
        record.id, "notification", message.id, "notify", None, "UNREAD",
    ))
    return message


def build_reminder(report: CompletenessReport) -> str:
    """
    Turn a completeness report's gaps into a reminder text.
    Returns an empty string when nothing is missing.
    """
    lines = []
    for field in report.missing_bio_fields:
        lines.append(f"- {field} belum diisi")
    if report.grades_missing:
        lines.append(f"- Nilai semester {report.period} belum ada")
    for category in report.missing_documents:
        lines.append(f"- Dokumen {category.value} belum diunggah")
    if report.missing_report_pages:
        pages = ", ".join(str(p) for p in report.missing_report_pages)
        lines.append(f"- Rapor semester {report.period} halaman {pages} belum diunggah")
    if not lines:
        return ""
    return "Mohon lengkapi data berikut:\n" + "\n".join(lines)


def notify_missing(record: StudentRecord, report: CompletenessReport) -> Optional[NotificationMessage]:
    """Send a reminder built from the report, or do nothing if the record is complete."""
    text = build_reminder(report)
    if not text:
        logger.info(f"No reminder for student {record.id}: semester {report.period} is complete")
        return None
    return notify(record, text)


def mark_read(record: StudentRecord, message_id: str) -> Optional[NotificationMessage]:
    message = next((m for m in record.admin_messages if m.id == message_id), None)
    if message is not None:
        message.is_read = True
    return message


def unread(record: StudentRecord) -> List[NotificationMessage]:
    return [m for m in record.admin_messages if not m.is_read]
