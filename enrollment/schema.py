"""
Data models for student enrollment records.
Uses Pydantic for validation and type safety.

A StudentRecord is the root aggregate: biographical fields, household data,
per-semester academic records, uploaded documents, correction requests and
admin messages all hang off it. The workflow modules mutate it in place.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List, Dict

from pydantic import BaseModel, Field, model_validator


def new_id() -> str:
    """Short random identifier used for documents, requests and messages."""
    return uuid.uuid4().hex[:9]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MediaKind(str, Enum):
    PDF = "PDF"
    IMAGE = "IMAGE"


class DocumentCategory(str, Enum):
    """
    Fixed document categories. Every uploaded file carries exactly one.
    RAPOR is the only slotted category (semester + page).
    """
    IJAZAH = "IJAZAH"                # Diploma from the previous school
    AKTA = "AKTA"                    # Birth certificate
    KK = "KK"                        # Household card
    KTP_AYAH = "KTP_AYAH"            # Father's identity card
    KTP_IBU = "KTP_IBU"              # Mother's identity card
    KIP = "KIP"                      # Welfare card
    SKL = "SKL"                      # Graduation letter
    FOTO = "FOTO"                    # Student photo
    KARTU_PELAJAR = "KARTU_PELAJAR"  # Student card
    RAPOR = "RAPOR"                  # Report card page
    LAINNYA = "LAINNYA"              # Anything else


class DocumentStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    NEEDS_REVISION = "NEEDS_REVISION"


class RequestStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Originator(str, Enum):
    """Who triggered an upload: the student themself, or school staff."""
    SELF = "SELF"
    STAFF = "STAFF"


class ReportSlot(BaseModel):
    """Sub-key for report card pages."""
    period: int = Field(ge=1)
    page: int = Field(ge=1)


class UploadedFile(BaseModel):
    """
    A file whose transfer has already completed.
    `location` is whatever the storage collaborator returned (usually a URL).
    """
    name: str
    content_type: str = ""
    size_bytes: int = 0
    location: str


class DocumentEntity(BaseModel):
    id: str = Field(default_factory=new_id)
    name: str
    media_kind: MediaKind = MediaKind.IMAGE
    location: str
    category: DocumentCategory
    upload_date: datetime = Field(default_factory=utcnow)
    size: str = ""
    status: DocumentStatus = DocumentStatus.PENDING
    # Only meaningful under NEEDS_REVISION
    reviewer_note: Optional[str] = None
    verifier_name: Optional[str] = None
    verification_date: Optional[datetime] = None
    slot: Optional[ReportSlot] = None

    @model_validator(mode="after")
    def _slot_only_for_reports(self):
        if self.category == DocumentCategory.RAPOR and self.slot is None:
            raise ValueError("RAPOR documents need a period/page slot")
        if self.category != DocumentCategory.RAPOR and self.slot is not None:
            raise ValueError(f"{self.category.value} documents cannot carry a slot")
        return self


class Evidence(BaseModel):
    """Supporting attachment for a correction request (scan of a birth certificate etc.)."""
    location: str
    name: str
    media_kind: MediaKind = MediaKind.IMAGE


class CorrectionRequest(BaseModel):
    id: str = Field(default_factory=new_id)
    field_path: str
    label: str
    original_value: str = ""
    proposed_value: str
    # Student's explanation, shown to the reviewer
    reason: str = ""
    evidence: Evidence
    status: RequestStatus = RequestStatus.PENDING
    request_date: datetime = Field(default_factory=utcnow)
    processed_date: Optional[datetime] = None
    reviewer_note: Optional[str] = None
    verifier_name: Optional[str] = None


class NotificationMessage(BaseModel):
    id: str = Field(default_factory=new_id)
    content: str
    date: datetime = Field(default_factory=utcnow)
    is_read: bool = False


class SubjectGrade(BaseModel):
    no: int
    subject: str
    score: float = 0
    competency: str = ""


class Attendance(BaseModel):
    sick: int = 0
    permitted: int = 0
    no_reason: int = 0


class Extracurricular(BaseModel):
    name: str
    score: str = ""


class AcademicRecord(BaseModel):
    """One semester's report card content. Read-only input to the analyzer."""
    semester: int
    class_level: str = ""
    phase: str = ""
    year: str = ""
    subjects: List[SubjectGrade] = []
    extracurriculars: List[Extracurricular] = []
    teacher_note: str = ""
    promotion_status: str = ""
    attendance: Attendance = Field(default_factory=Attendance)


class ParentData(BaseModel):
    name: str = ""
    nik: str = ""
    birth_place_date: str = ""
    education: str = ""
    job: str = ""
    income: str = ""
    phone: str = ""


class HouseholdData(BaseModel):
    """National registry (Dapodik) data: identifiers and address details."""
    nik: str = ""
    no_kk: str = ""
    rt: str = ""
    rw: str = ""
    dusun: str = ""
    kelurahan: str = ""
    kecamatan: str = ""
    kode_pos: str = ""
    living_status: str = ""
    transportation: str = ""
    email: str = ""
    special_needs: str = ""
    kip_receiver: str = ""
    kip_number: str = ""
    kks_number: str = ""
    birth_reg_number: str = ""
    latitude: str = ""
    longitude: str = ""


class StudentRecord(BaseModel):
    """
    Root aggregate for one enrolled student.
    Created once at intake; never deleted by this package.
    """
    id: str = Field(default_factory=new_id)
    nis: str = ""
    nisn: str = ""
    full_name: str = ""
    gender: str = ""  # "L" or "P"
    birth_place: str = ""
    birth_date: str = ""
    religion: str = ""
    nationality: str = ""
    address: str = ""
    sub_district: str = ""
    district: str = ""
    postal_code: str = ""
    child_order: int = 0
    sibling_count: int = 0
    height: int = 0
    weight: int = 0
    class_name: str = ""
    entry_year: int = 0
    status: str = "AKTIF"
    previous_school: str = ""

    father: ParentData = Field(default_factory=ParentData)
    mother: ParentData = Field(default_factory=ParentData)
    guardian: Optional[ParentData] = None
    dapodik: HouseholdData = Field(default_factory=HouseholdData)

    # Keyed by semester number (1-6)
    academic_records: Dict[int, AcademicRecord] = {}
    documents: List[DocumentEntity] = []
    correction_requests: List[CorrectionRequest] = []
    admin_messages: List[NotificationMessage] = []
