"""
Enrollment record workflow: completeness analysis, document verification
and field correction requests for student records.

Workflow modules are imported as namespaces (``documents.upload``,
``corrections.approve``) because several of them share operation names.
"""

from enrollment import completeness, corrections, documents, notifications, verification
from enrollment.errors import EnrollmentError, StateError, ValidationError
from enrollment.schema import (
    DocumentCategory,
    DocumentEntity,
    DocumentStatus,
    Evidence,
    Originator,
    ReportSlot,
    RequestStatus,
    StudentRecord,
    UploadedFile,
)

__all__ = [
    "completeness",
    "corrections",
    "documents",
    "notifications",
    "verification",
    "EnrollmentError",
    "StateError",
    "ValidationError",
    "DocumentCategory",
    "DocumentEntity",
    "DocumentStatus",
    "Evidence",
    "Originator",
    "ReportSlot",
    "RequestStatus",
    "StudentRecord",
    "UploadedFile",
]
