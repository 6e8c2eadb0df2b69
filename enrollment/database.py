"""
Local SQLite store for student records.

Each StudentRecord is stored whole as JSON (documents, correction requests,
messages and academic records included), so a save followed by a load gives
back an identical record. Concurrent saves of the same student are
last-write-wins.
"""

import json
import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from enrollment.config import get_settings
from enrollment.schema import DocumentStatus, RequestStatus, StudentRecord

logger = logging.getLogger(__name__)

# None means "ask the settings"; tests monkeypatch this
DB_PATH: Optional[str] = None


def _db_path() -> Path:
    return Path(DB_PATH or get_settings().db_path)


def _connect() -> sqlite3.Connection:
    db_path = _db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    return conn


def init_database():
    """Initialize the SQLite database with the students table."""
    conn = _connect()
    try:
        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS students (
                student_id TEXT PRIMARY KEY,
                nisn TEXT,
                full_name TEXT,
                class_name TEXT,
                payload TEXT NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        cursor.execute("""
            CREATE INDEX IF NOT EXISTS idx_class_name
            ON students(class_name)
        """)
        conn.commit()
    finally:
        conn.close()


def save_record(record: StudentRecord) -> bool:
    """
    Insert or overwrite a student record.

    Args:
        record: StudentRecord to save

    Returns:
        True if successful, False otherwise
    """
    init_database()
    conn = _connect()
    try:
        conn.execute("""
            INSERT INTO students (student_id, nisn, full_name, class_name, payload, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            ON CONFLICT(student_id) DO UPDATE SET
                nisn = excluded.nisn,
                full_name = excluded.full_name,
                class_name = excluded.class_name,
                payload = excluded.payload,
                updated_at = excluded.updated_at
        """, (
            record.id,
            record.nisn,
            record.full_name,
            record.class_name,
            json.dumps(record.model_dump(mode="json")),
            datetime.now(timezone.utc).isoformat(),
        ))
        conn.commit()
        return True
    except sqlite3.Error as e:
        logger.error(f"Error saving student {record.id}: {e}")
        conn.rollback()
        return False
    finally:
        conn.close()


def _row_to_record(row: sqlite3.Row) -> StudentRecord:
    return StudentRecord.model_validate(json.loads(row["payload"]))


def get_record_by_id(student_id: str) -> Optional[StudentRecord]:
    """
    Get a single student by id.

    Returns:
        StudentRecord if found, None otherwise
    """
    init_database()
    conn = _connect()
    try:
        row = conn.execute(
            "SELECT payload FROM students WHERE student_id = ?", (student_id,)
        ).fetchone()
    finally:
        conn.close()
    return _row_to_record(row) if row else None


def get_records(class_name: Optional[str] = None, limit: Optional[int] = None) -> List[StudentRecord]:
    """
    Get student records ordered by name.

    Args:
        class_name: Only students of this class (None = all classes)
        limit: Maximum number of records to return (None = no limit)
    """
    init_database()
    query = "SELECT payload FROM students"
    params: list = []
    if class_name is not None:
        query += " WHERE class_name = ?"
        params.append(class_name)
    query += " ORDER BY full_name"
    if limit is not None:
        query += " LIMIT ?"
        params.append(limit)

    conn = _connect()
    try:
        rows = conn.execute(query, params).fetchall()
    finally:
        conn.close()
    if limit is not None and len(rows) >= limit:
        logger.warning(f"get_records: result capped at {limit} rows")
    return [_row_to_record(row) for row in rows]


def get_stats() -> Dict[str, int]:
    """
    Counts across all stored students.

    Returns:
        Dictionary with total students, pending documents and pending correction requests
    """
    records = get_records()
    return {
        "total_count": len(records),
        "pending_documents": sum(
            1 for r in records for d in r.documents if d.status == DocumentStatus.PENDING
        ),
        "pending_corrections": sum(
            1 for r in records for c in r.correction_requests if c.status == RequestStatus.PENDING
        ),
    }
