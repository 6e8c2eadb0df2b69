"""
Environment-driven settings for the completeness analyzer and the record store.

Values are read from the process environment (a local .env file is loaded
first if present). Defaults match the school's standard intake requirements.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import find_dotenv, load_dotenv

from enrollment.schema import DocumentCategory

DEFAULT_REQUIRED_DOCS: Tuple[DocumentCategory, ...] = (
    DocumentCategory.IJAZAH,
    DocumentCategory.AKTA,
    DocumentCategory.KK,
    DocumentCategory.KTP_AYAH,
    DocumentCategory.KTP_IBU,
    DocumentCategory.FOTO,
)
DEFAULT_REPORT_PAGES = 5
DEFAULT_PERIOD_COUNT = 6

# Values left by intake forms that mean "not filled in yet"
ADDRESS_PLACEHOLDER = "-"
FATHER_NAME_PLACEHOLDER = "Nama Ayah"
MOTHER_NAME_PLACEHOLDER = "Nama Ibu"

# Slotted and optional categories never count towards required documents
_NEVER_REQUIRED = {DocumentCategory.RAPOR, DocumentCategory.LAINNYA}


@dataclass(frozen=True)
class Settings:
    required_documents: Tuple[DocumentCategory, ...] = DEFAULT_REQUIRED_DOCS
    report_pages_per_period: int = DEFAULT_REPORT_PAGES
    period_count: int = DEFAULT_PERIOD_COUNT
    db_path: str = "enrollment.db"
    log_level: str = "INFO"


def _parse_required_docs(raw: Optional[str]) -> Tuple[DocumentCategory, ...]:
    if raw is None or not raw.strip():
        return DEFAULT_REQUIRED_DOCS
    categories = []
    for token in raw.split(","):
        token = token.strip().upper()
        if not token:
            continue
        try:
            category = DocumentCategory(token)
        except ValueError:
            raise ValueError(f"Unknown document category in ENROLLMENT_REQUIRED_DOCS: {token}")
        if category in _NEVER_REQUIRED:
            raise ValueError(f"{token} cannot be a required document")
        if category not in categories:
            categories.append(category)
    return tuple(categories)


def _parse_positive_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value < 1:
        raise ValueError(f"{name} must be >= 1, got {value}")
    return value


def get_settings() -> Settings:
    """
    Build Settings from the environment.

    Environment variables:
        ENROLLMENT_REQUIRED_DOCS: comma-separated document categories
        ENROLLMENT_REPORT_PAGES: report card pages expected per semester
        ENROLLMENT_PERIOD_COUNT: number of semesters tracked
        ENROLLMENT_DB_PATH: SQLite file for the record store
        ENROLLMENT_LOG_LEVEL: logging level name for scripts

    Raises:
        ValueError: if a variable is set to something unusable
    """
    load_dotenv(find_dotenv(usecwd=True))
    return Settings(
        required_documents=_parse_required_docs(os.environ.get("ENROLLMENT_REQUIRED_DOCS")),
        report_pages_per_period=_parse_positive_int("ENROLLMENT_REPORT_PAGES", DEFAULT_REPORT_PAGES),
        period_count=_parse_positive_int("ENROLLMENT_PERIOD_COUNT", DEFAULT_PERIOD_COUNT),
        db_path=os.environ.get("ENROLLMENT_DB_PATH") or os.path.join(os.getcwd(), "enrollment.db"),
        log_level=(os.environ.get("ENROLLMENT_LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Set up root logging for scripts. Library modules only create loggers."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s'
    )
