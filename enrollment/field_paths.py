"""
Known correctable fields of a StudentRecord, addressed by dot paths.

Correction requests name their target with the same camelCase paths the
intake forms use ("father.name", "dapodik.nik"). Only paths in FIELD_PATHS
are accepted, so a typo cannot create a stray nested structure.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict

from enrollment.errors import ValidationError
from enrollment.schema import ParentData, StudentRecord


def _to_int(value: Any) -> int:
    """Numeric fields fall back to 0 on anything unparseable."""
    try:
        return int(float(str(value).strip()))
    except (TypeError, ValueError):
        return 0


def _to_str(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class FieldSpec:
    label: str
    attrs: tuple  # attribute chain on the pydantic model
    coerce: Callable[[Any], Any] = _to_str


def _parent_fields(prefix: str, title: str) -> Dict[str, FieldSpec]:
    return {
        f"{prefix}.name": FieldSpec(f"Nama {title}", (prefix, "name")),
        f"{prefix}.nik": FieldSpec(f"NIK {title}", (prefix, "nik")),
        f"{prefix}.birthPlaceDate": FieldSpec(f"Tahun Lahir {title}", (prefix, "birth_place_date")),
        f"{prefix}.education": FieldSpec(f"Pendidikan {title}", (prefix, "education")),
        f"{prefix}.job": FieldSpec(f"Pekerjaan {title}", (prefix, "job")),
        f"{prefix}.income": FieldSpec(f"Penghasilan {title}", (prefix, "income")),
        f"{prefix}.phone": FieldSpec(f"No Handphone {title}", (prefix, "phone")),
    }


FIELD_PATHS: Dict[str, FieldSpec] = {
    "fullName": FieldSpec("Nama Lengkap", ("full_name",)),
    "nis": FieldSpec("NIS", ("nis",)),
    "nisn": FieldSpec("NISN", ("nisn",)),
    "gender": FieldSpec("Jenis Kelamin", ("gender",)),
    "birthPlace": FieldSpec("Tempat Lahir", ("birth_place",)),
    "birthDate": FieldSpec("Tanggal Lahir", ("birth_date",)),
    "religion": FieldSpec("Agama", ("religion",)),
    "nationality": FieldSpec("Kewarganegaraan", ("nationality",)),
    "className": FieldSpec("Kelas Saat Ini", ("class_name",)),
    "entryYear": FieldSpec("Tahun Masuk", ("entry_year",), _to_int),
    "status": FieldSpec("Status Siswa", ("status",)),
    "previousSchool": FieldSpec("Sekolah Asal", ("previous_school",)),
    "address": FieldSpec("Alamat Jalan", ("address",)),
    "subDistrict": FieldSpec("Kecamatan", ("sub_district",)),
    "district": FieldSpec("Kabupaten / Kota", ("district",)),
    "postalCode": FieldSpec("Kode Pos", ("postal_code",)),
    "childOrder": FieldSpec("Anak Ke", ("child_order",), _to_int),
    "siblingCount": FieldSpec("Jumlah Saudara", ("sibling_count",), _to_int),
    "height": FieldSpec("Tinggi Badan", ("height",), _to_int),
    "weight": FieldSpec("Berat Badan", ("weight",), _to_int),
    "dapodik.nik": FieldSpec("NIK (KTP)", ("dapodik", "nik")),
    "dapodik.noKK": FieldSpec("No KK", ("dapodik", "no_kk")),
    "dapodik.rt": FieldSpec("RT", ("dapodik", "rt")),
    "dapodik.rw": FieldSpec("RW", ("dapodik", "rw")),
    "dapodik.dusun": FieldSpec("Dusun", ("dapodik", "dusun")),
    "dapodik.kelurahan": FieldSpec("Kelurahan / Desa", ("dapodik", "kelurahan")),
    "dapodik.livingStatus": FieldSpec("Jenis Tinggal", ("dapodik", "living_status")),
    "dapodik.transportation": FieldSpec("Transportasi", ("dapodik", "transportation")),
    "dapodik.specialNeeds": FieldSpec("Berkebutuhan Khusus", ("dapodik", "special_needs")),
    "dapodik.latitude": FieldSpec("Lintang", ("dapodik", "latitude")),
    "dapodik.longitude": FieldSpec("Bujur", ("dapodik", "longitude")),
    **_parent_fields("father", "Ayah"),
    **_parent_fields("mother", "Ibu"),
    **_parent_fields("guardian", "Wali"),
}


def get_field_spec(path: str) -> FieldSpec:
    """Look up a field path. Raises ValidationError for unknown paths."""
    spec = FIELD_PATHS.get((path or "").strip())
    if spec is None:
        raise ValidationError(f"Unknown field path: {path!r}")
    return spec


def get_value(record: StudentRecord, path: str) -> Any:
    """
    Read the current value at a field path.
    Returns None when an optional sub-record (guardian) is absent.
    """
    spec = get_field_spec(path)
    current: Any = record
    for attr in spec.attrs:
        if current is None:
            return None
        current = getattr(current, attr)
    return current


def set_value(record: StudentRecord, path: str, value: Any) -> Any:
    """
    Write a value at a field path, coercing it to the field's type.

    Missing optional sub-records are created on the way down.

    Returns:
        The coerced value that was stored
    """
    spec = get_field_spec(path)
    current: Any = record
    for attr in spec.attrs[:-1]:
        child = getattr(current, attr)
        if child is None:
            # Only guardian is optional today; every sub-record is ParentData-shaped
            child = ParentData()
            setattr(current, attr, child)
        current = child
    coerced = spec.coerce(value)
    setattr(current, spec.attrs[-1], coerced)
    return coerced
