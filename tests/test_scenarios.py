"""
End-to-end workflow: analyze → notify → propose/upload → verify → analyze again.
"""

from enrollment import completeness, corrections, documents, notifications, verification
from enrollment.schema import (
    DocumentCategory,
    DocumentStatus,
    Evidence,
    MediaKind,
    ReportSlot,
)


class TestIntakeScenario:

    def test_fresh_intake_scores(self, incomplete_student, settings):
        report = completeness.analyze(incomplete_student, 1, settings)

        assert report.bio_percent == 40
        assert report.doc_percent == 0
        assert report.grade_percent == 0
        assert report.report_percent == 0
        assert report.overall_percent == 10


class TestCorrectionScenario:

    def test_father_name_correction_raises_bio_score(self, incomplete_student, settings):
        before = completeness.analyze(incomplete_student, 1, settings)
        assert before.bio_percent == 40

        reminder = notifications.notify_missing(incomplete_student, before)
        assert "Nama Ayah" in reminder.content

        request = corrections.propose(
            incomplete_student,
            "father.name",
            "Budi Santoso",
            Evidence(location="https://files.example/kk.jpg", name="kk.jpg", media_kind=MediaKind.IMAGE),
            reason="Nama ayah belum diganti dari isian awal",
        )
        assert incomplete_student.father.name == "Nama Ayah"

        corrections.approve(incomplete_student, request)
        assert incomplete_student.father.name == "Budi Santoso"

        after = completeness.analyze(incomplete_student, 1, settings)
        assert after.bio_percent == 60
        assert "Nama Ayah" not in after.missing_bio_fields


class TestReportRevisionScenario:

    def test_revision_keeps_presence_and_reupload_resets(self, incomplete_student, make_file, settings):
        for page in range(1, 6):
            documents.upload(incomplete_student, make_file(f"rapor-s2-{page}.jpg"), DocumentCategory.RAPOR,
                             slot=ReportSlot(period=2, page=page), settings=settings)

        page3 = documents.by_period_and_page(incomplete_student.documents, 2, 3)
        verification.request_revision(incomplete_student, page3, "blurry")

        report = completeness.analyze(incomplete_student, 2, settings)
        assert report.report_percent == 100
        flagged = documents.by_period_and_page(incomplete_student.documents, 2, 3)
        assert flagged.status == DocumentStatus.NEEDS_REVISION
        assert flagged.reviewer_note == "blurry"

        documents.upload(incomplete_student, make_file("rapor-s2-3-retake.jpg"), DocumentCategory.RAPOR,
                         slot=ReportSlot(period=2, page=3), settings=settings)
        retaken = documents.by_period_and_page(incomplete_student.documents, 2, 3)
        assert retaken.status == DocumentStatus.PENDING
        assert retaken.reviewer_note is None
        assert retaken.id != page3.id
        assert completeness.analyze(incomplete_student, 2, settings).report_percent == 100
        assert len(documents.report_pages(incomplete_student.documents, 2)) == 5
