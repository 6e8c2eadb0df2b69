"""
Grouping module: organizes student records into class buckets and builds
the per-class monitoring recap.
"""

import re
from typing import Any, Dict, List, Optional

from enrollment.completeness import analyze, round_half_up
from enrollment.config import Settings, get_settings
from enrollment.schema import StudentRecord


def normalize_key(text: Optional[str]) -> str:
    """
    Normalize a key for grouping: trim whitespace, collapse spaces, casefold.

    Args:
        text: Original text value

    Returns:
        Normalized key for grouping
    """
    if not text:
        return ""
    text = re.sub(r'\s+', ' ', str(text).strip())
    return text.casefold()


def group_by_class(records: List[StudentRecord]) -> Dict[str, List[StudentRecord]]:
    """
    Group records by class name.

    "VII A", "vii a" and " VII  A " land in the same bucket; the bucket is
    labelled with the first spelling seen. Records without a class go under "".
    """
    labels: Dict[str, str] = {}
    groups: Dict[str, List[StudentRecord]] = {}
    for record in records:
        key = normalize_key(record.class_name)
        label = labels.setdefault(key, re.sub(r'\s+', ' ', (record.class_name or "").strip()))
        groups.setdefault(label, []).append(record)
    return dict(sorted(groups.items()))


def search(records: List[StudentRecord], term: Optional[str]) -> List[StudentRecord]:
    """Case-insensitive match on full name or NISN. A blank term matches everything."""
    needle = normalize_key(term)
    if not needle:
        return list(records)
    return [
        r for r in records
        if needle in normalize_key(r.full_name) or needle in (r.nisn or "")
    ]


def class_recap(
    records: List[StudentRecord],
    period: int,
    settings: Optional[Settings] = None
) -> Dict[str, Any]:
    """
    Build the completeness recap for one class and semester.

    Returns:
        Dict with structure:
        {
            "period": 2,
            "student_count": 30,
            "rows": [ {student_id, full_name, nisn, overall, bio, grades, documents, report}, ... ],
            "averages": {"overall": .., "bio": .., "grades": .., "documents": .., "report": ..},
            "complete_count": 12
        }
        Rows are sorted least complete first.
    """
    settings = settings or get_settings()
    rows = []
    for record in records:
        report = analyze(record, period, settings)
        rows.append({
            "student_id": record.id,
            "full_name": record.full_name,
            "nisn": record.nisn,
            "overall": report.overall_percent,
            "bio": report.bio_percent,
            "grades": report.grade_percent,
            "documents": report.doc_percent,
            "report": report.report_percent,
        })
    rows.sort(key=lambda row: (row["overall"], row["full_name"]))

    averages = {}
    for column in ("overall", "bio", "grades", "documents", "report"):
        if rows:
            averages[column] = round_half_up(sum(row[column] for row in rows) / len(rows))
        else:
            averages[column] = 0

    return {
        "period": period,
        "student_count": len(rows),
        "rows": rows,
        "averages": averages,
        "complete_count": sum(1 for row in rows if row["overall"] == 100),
    }
