"""
Completeness analysis: how much of a student's required data has been submitted.

Four independent scores per (student, semester):
  - bio: five biographical checks, 20 points each
  - grades: 100 if the semester has graded subjects, else 0
  - documents: share of required document categories present
  - report: share of report card pages uploaded for the semester

Presence counts, not approval: a document still waiting for review (or sent
back for revision) counts as submitted. Verification progress is tracked
separately by the verification queue.
"""

import math
from typing import List, Optional

from pydantic import BaseModel

from enrollment.config import (
    ADDRESS_PLACEHOLDER,
    FATHER_NAME_PLACEHOLDER,
    MOTHER_NAME_PLACEHOLDER,
    Settings,
    get_settings,
)
from enrollment.documents import by_category, by_period_and_page, report_pages
from enrollment.schema import DocumentCategory, StudentRecord

BIO_CHECK_COUNT = 5


class CompletenessReport(BaseModel):
    student_id: str
    period: int
    bio_percent: int
    grade_percent: int
    doc_percent: int
    report_percent: int
    overall_percent: int
    missing_bio_fields: List[str] = []
    missing_documents: List[DocumentCategory] = []
    missing_report_pages: List[int] = []
    grades_missing: bool = False

    @property
    def is_complete(self) -> bool:
        return self.overall_percent == 100


class MonitoringReport(BaseModel):
    """Whole-enrollment view across every semester."""
    student_id: str
    bio_percent: int
    grade_percent: int
    doc_percent: int
    report_percent: int
    missing_bio_fields: List[str] = []
    missing_documents: List[DocumentCategory] = []
    missing_grade_periods: List[int] = []
    missing_report_page_count: int = 0


def round_half_up(value: float) -> int:
    """Round .5 upwards like the intake forms do (Python's round() is banker's rounding)."""
    return int(math.floor(value + 0.5))


def percent(done: int, total: int) -> int:
    """Integer percentage clamped to [0, 100]. An empty requirement set is complete."""
    if total <= 0:
        return 100
    return max(0, min(100, round_half_up(done / total * 100)))


def _is_blank(value: Optional[str], placeholder: Optional[str] = None) -> bool:
    if value is None or not str(value).strip():
        return True
    return placeholder is not None and str(value).strip() == placeholder


def missing_bio_fields(record: StudentRecord) -> List[str]:
    """Labels of the biographical fields still missing or left at their placeholder."""
    missing = []
    if _is_blank(record.nisn):
        missing.append("NISN")
    if _is_blank(record.dapodik.nik if record.dapodik else None):
        missing.append("NIK")
    if _is_blank(record.address, ADDRESS_PLACEHOLDER):
        missing.append("Alamat")
    if _is_blank(record.father.name if record.father else None, FATHER_NAME_PLACEHOLDER):
        missing.append("Nama Ayah")
    if _is_blank(record.mother.name if record.mother else None, MOTHER_NAME_PLACEHOLDER):
        missing.append("Nama Ibu")
    return missing


def has_grades(record: StudentRecord, period: int) -> bool:
    academic = record.academic_records.get(period)
    return academic is not None and len(academic.subjects) > 0


def missing_documents(record: StudentRecord, settings: Settings) -> List[DocumentCategory]:
    return [
        category for category in settings.required_documents
        if by_category(record.documents, category) is None
    ]


def analyze(record: StudentRecord, period: int, settings: Optional[Settings] = None) -> CompletenessReport:
    """
    Score a student's completeness for one semester. Read-only.

    Args:
        record: Student record
        period: Semester number
        settings: Overrides environment settings (required documents, pages per semester)

    Returns:
        CompletenessReport with the four scores, their rounded mean and the gap lists
    """
    settings = settings or get_settings()

    bio_missing = missing_bio_fields(record)
    bio_percent = percent(BIO_CHECK_COUNT - len(bio_missing), BIO_CHECK_COUNT)

    grades_ok = has_grades(record, period)
    grade_percent = 100 if grades_ok else 0

    docs_missing = missing_documents(record, settings)
    required_count = len(settings.required_documents)
    doc_percent = percent(required_count - len(docs_missing), required_count)

    page_count = settings.report_pages_per_period
    uploaded = len(report_pages(record.documents, period))
    report_percent = percent(uploaded, page_count)
    pages_missing = [
        page for page in range(1, page_count + 1)
        if by_period_and_page(record.documents, period, page) is None
    ]

    overall = round_half_up((bio_percent + grade_percent + doc_percent + report_percent) / 4)

    return CompletenessReport(
        student_id=record.id,
        period=period,
        bio_percent=bio_percent,
        grade_percent=grade_percent,
        doc_percent=doc_percent,
        report_percent=report_percent,
        overall_percent=overall,
        missing_bio_fields=bio_missing,
        missing_documents=docs_missing,
        missing_report_pages=pages_missing,
        grades_missing=not grades_ok,
    )


def analyze_all_periods(record: StudentRecord, settings: Optional[Settings] = None) -> MonitoringReport:
    """
    Score a student across every semester at once.

    Grades count filled semesters out of period_count; report pages count
    uploads against period_count * report_pages_per_period, capped at 100.
    """
    settings = settings or get_settings()
    periods = range(1, settings.period_count + 1)

    bio_missing = missing_bio_fields(record)
    missing_periods = [p for p in periods if not has_grades(record, p)]
    docs_missing = missing_documents(record, settings)
    required_count = len(settings.required_documents)

    expected_pages = settings.period_count * settings.report_pages_per_period
    uploaded_pages = sum(len(report_pages(record.documents, p)) for p in periods)

    return MonitoringReport(
        student_id=record.id,
        bio_percent=percent(BIO_CHECK_COUNT - len(bio_missing), BIO_CHECK_COUNT),
        grade_percent=percent(settings.period_count - len(missing_periods), settings.period_count),
        doc_percent=percent(required_count - len(docs_missing), required_count),
        report_percent=percent(uploaded_pages, expected_pages),
        missing_bio_fields=bio_missing,
        missing_documents=docs_missing,
        missing_grade_periods=missing_periods,
        missing_report_page_count=max(0, expected_pages - uploaded_pages),
    )
