"""
Tests for the document registry: uploads, slot replacement, removal and lookups.
"""

import pytest

from enrollment import documents
from enrollment.errors import StateError, ValidationError
from enrollment.schema import (
    DocumentCategory,
    DocumentStatus,
    MediaKind,
    Originator,
    ReportSlot,
)


class TestMediaKindAndSize:

    def test_pdf_content_type_is_pdf(self):
        assert documents.infer_media_kind("application/pdf") == MediaKind.PDF
        assert documents.infer_media_kind("Application/PDF") == MediaKind.PDF

    def test_everything_else_is_image(self):
        assert documents.infer_media_kind("image/png") == MediaKind.IMAGE
        assert documents.infer_media_kind("") == MediaKind.IMAGE
        assert documents.infer_media_kind(None) == MediaKind.IMAGE

    def test_format_size_kb_and_mb(self):
        assert documents.format_size(524288) == "512 KB"
        assert documents.format_size(1310720) == "1.25 MB"


class TestUpload:

    def test_self_upload_starts_pending(self, incomplete_student, make_file, settings):
        doc = documents.upload(
            incomplete_student, make_file("kk.pdf", "application/pdf"), DocumentCategory.KK,
            settings=settings,
        )
        assert doc.status == DocumentStatus.PENDING
        assert doc.media_kind == MediaKind.PDF
        assert doc.name == "kk.pdf"
        assert doc.location == "https://files.example/kk.pdf"
        assert doc.verification_date is None
        assert incomplete_student.documents == [doc]

    def test_staff_upload_starts_approved(self, incomplete_student, make_file, settings):
        doc = documents.upload(
            incomplete_student, make_file(), DocumentCategory.FOTO,
            originator=Originator.STAFF, uploader_name="Bu Rina", settings=settings,
        )
        assert doc.status == DocumentStatus.APPROVED
        assert doc.verifier_name == "Bu Rina"
        assert doc.verification_date is not None

    def test_upload_replaces_same_category(self, incomplete_student, make_file, settings):
        first = documents.upload(incomplete_student, make_file("akta1.jpg"), DocumentCategory.AKTA, settings=settings)
        second = documents.upload(incomplete_student, make_file("akta2.jpg"), DocumentCategory.AKTA, settings=settings)

        akta_docs = [d for d in incomplete_student.documents if d.category == DocumentCategory.AKTA]
        assert akta_docs == [second]
        assert documents.by_category(incomplete_student.documents, DocumentCategory.AKTA).id == second.id
        assert first.id not in {d.id for d in incomplete_student.documents}

    def test_upload_keeps_other_categories(self, incomplete_student, make_file, settings):
        kk = documents.upload(incomplete_student, make_file(), DocumentCategory.KK, settings=settings)
        documents.upload(incomplete_student, make_file(), DocumentCategory.FOTO, settings=settings)
        documents.upload(incomplete_student, make_file(), DocumentCategory.FOTO, settings=settings)

        assert len(incomplete_student.documents) == 2
        assert documents.by_category(incomplete_student.documents, DocumentCategory.KK) is kk

    def test_report_pages_keyed_by_period_and_page(self, incomplete_student, make_file, settings):
        p1 = documents.upload(incomplete_student, make_file(), DocumentCategory.RAPOR,
                              slot=ReportSlot(period=2, page=1), settings=settings)
        p2 = documents.upload(incomplete_student, make_file(), DocumentCategory.RAPOR,
                              slot=ReportSlot(period=2, page=2), settings=settings)
        other_period = documents.upload(incomplete_student, make_file(), DocumentCategory.RAPOR,
                                        slot=ReportSlot(period=3, page=1), settings=settings)

        assert len(incomplete_student.documents) == 3
        assert documents.by_period_and_page(incomplete_student.documents, 2, 1) is p1
        assert documents.by_period_and_page(incomplete_student.documents, 2, 2) is p2
        assert documents.by_period_and_page(incomplete_student.documents, 3, 1) is other_period
        assert documents.by_period_and_page(incomplete_student.documents, 2, 3) is None

    def test_report_page_reupload_replaces_only_that_page(self, incomplete_student, make_file, settings):
        documents.upload(incomplete_student, make_file(), DocumentCategory.RAPOR,
                         slot=ReportSlot(period=1, page=1), settings=settings)
        old = documents.upload(incomplete_student, make_file(), DocumentCategory.RAPOR,
                               slot=ReportSlot(period=1, page=2), settings=settings)
        new = documents.upload(incomplete_student, make_file("retake.jpg"), DocumentCategory.RAPOR,
                               slot=ReportSlot(period=1, page=2), settings=settings)

        pages = documents.report_pages(incomplete_student.documents, 1)
        assert [d.slot.page for d in pages] == [1, 2]
        assert pages[1] is new
        assert old.id not in {d.id for d in incomplete_student.documents}

    def test_report_without_slot_is_rejected(self, incomplete_student, make_file, settings):
        with pytest.raises(ValidationError):
            documents.upload(incomplete_student, make_file(), DocumentCategory.RAPOR, settings=settings)
        assert incomplete_student.documents == []

    def test_slot_on_regular_category_is_rejected(self, incomplete_student, make_file, settings):
        with pytest.raises(ValidationError):
            documents.upload(incomplete_student, make_file(), DocumentCategory.KK,
                             slot=ReportSlot(period=1, page=1), settings=settings)
        assert incomplete_student.documents == []

    def test_slot_outside_configured_grid_is_rejected(self, incomplete_student, make_file, settings):
        with pytest.raises(ValidationError, match="Page 6"):
            documents.upload(incomplete_student, make_file(), DocumentCategory.RAPOR,
                             slot=ReportSlot(period=1, page=6), settings=settings)
        with pytest.raises(ValidationError, match="Period 7"):
            documents.upload(incomplete_student, make_file(), DocumentCategory.RAPOR,
                             slot=ReportSlot(period=7, page=1), settings=settings)

    def test_category_accepts_plain_string(self, incomplete_student, make_file, settings):
        doc = documents.upload(incomplete_student, make_file(), "KTP_AYAH", settings=settings)
        assert doc.category == DocumentCategory.KTP_AYAH


class TestRemove:

    def test_remove_existing(self, incomplete_student, make_file, settings):
        doc = documents.upload(incomplete_student, make_file(), DocumentCategory.KK, settings=settings)
        removed = documents.remove(incomplete_student, doc.id)
        assert removed is doc
        assert incomplete_student.documents == []

    def test_remove_unknown_id_is_noop(self, incomplete_student, make_file, settings):
        doc = documents.upload(incomplete_student, make_file(), DocumentCategory.KK, settings=settings)
        assert documents.remove(incomplete_student, "does-not-exist") is None
        assert incomplete_student.documents == [doc]

    def test_approved_document_removable_by_default(self, incomplete_student, make_file, settings):
        doc = documents.upload(incomplete_student, make_file(), DocumentCategory.KK,
                               originator=Originator.STAFF, settings=settings)
        assert documents.remove(incomplete_student, doc.id) is doc

    def test_protect_approved_blocks_removal(self, incomplete_student, make_file, settings):
        doc = documents.upload(incomplete_student, make_file(), DocumentCategory.KK,
                               originator=Originator.STAFF, settings=settings)
        with pytest.raises(StateError):
            documents.remove(incomplete_student, doc.id, protect_approved=True)
        assert incomplete_student.documents == [doc]

    def test_protect_approved_allows_pending(self, incomplete_student, make_file, settings):
        doc = documents.upload(incomplete_student, make_file(), DocumentCategory.KK, settings=settings)
        assert documents.remove(incomplete_student, doc.id, protect_approved=True) is doc


class TestLookups:

    def test_by_category_absent(self, incomplete_student):
        assert documents.by_category(incomplete_student.documents, DocumentCategory.IJAZAH) is None

    def test_by_period_and_page_ignores_other_categories(self, incomplete_student, make_file, settings):
        documents.upload(incomplete_student, make_file(), DocumentCategory.FOTO, settings=settings)
        assert documents.by_period_and_page(incomplete_student.documents, 1, 1) is None
