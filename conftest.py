"""Shared pytest fixtures for the enrollment workflow tests."""

import pytest

from enrollment.config import Settings
from enrollment.schema import (
    AcademicRecord,
    Evidence,
    HouseholdData,
    MediaKind,
    ParentData,
    StudentRecord,
    SubjectGrade,
    UploadedFile,
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep a developer's .env or shell exports from leaking into tests."""
    for name in (
        "ENROLLMENT_REQUIRED_DOCS",
        "ENROLLMENT_REPORT_PAGES",
        "ENROLLMENT_PERIOD_COUNT",
        "ENROLLMENT_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ENROLLMENT_DB_PATH", str(tmp_path / "enrollment.db"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def evidence():
    return Evidence(location="https://files.example/akta.jpg", name="akta.jpg", media_kind=MediaKind.IMAGE)


@pytest.fixture
def make_file():
    def _make(name="scan.jpg", content_type="image/jpeg", size_bytes=204800, location=None):
        return UploadedFile(
            name=name,
            content_type=content_type,
            size_bytes=size_bytes,
            location=location or f"https://files.example/{name}",
        )
    return _make


@pytest.fixture
def incomplete_student():
    """Fresh intake: NISN and address filled, everything else left at defaults."""
    return StudentRecord(
        id="stu-001",
        nisn="0081234567",
        full_name="Andi Pratama",
        class_name="VII A",
        address="Jl. Raya Pacet 12",
        father=ParentData(name="Nama Ayah"),
        mother=ParentData(name="Nama Ibu"),
        dapodik=HouseholdData(nik=""),
    )


@pytest.fixture
def complete_student():
    """Biographical data filled and semester 1 graded."""
    return StudentRecord(
        id="stu-002",
        nisn="0087654321",
        full_name="Siti Aminah",
        class_name="VII A",
        address="Dusun Krajan RT 02",
        father=ParentData(name="Slamet Riyadi"),
        mother=ParentData(name="Sri Wahyuni"),
        dapodik=HouseholdData(nik="3516010101090001"),
        academic_records={
            1: AcademicRecord(
                semester=1,
                subjects=[
                    SubjectGrade(no=1, subject="Matematika", score=88),
                    SubjectGrade(no=2, subject="Bahasa Indonesia", score=90),
                ],
            )
        },
    )
