"""
Central data model definitions used across the project.

The backend returns loosely shaped JSON records. This module turns them into
frozen dataclasses once, at the boundary, so that:
- all modules share the same field names
- a course's categoryId/departmentId is always an EntityRef (or None),
  no matter whether the server sent a bare id or an embedded object
- filtering code never has to look at the wire shape again
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TypeVar


T = TypeVar("T")


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EntityRef:
    """
    Reference from a course to its category or department.

    name is only known when the server embedded the referenced object.
    """

    id: Optional[str]
    name: Optional[str] = None


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    description: str = ""
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class Department:
    id: Optional[str]
    name: str
    description: str = ""
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class FeeStructure:
    registration_fee: Optional[float] = None
    full_fee: Optional[float] = None


@dataclass(frozen=True)
class Course:
    """
    Represents one course as served by /public/courses.
    """

    id: str
    name: str
    description: str = ""
    category: Optional[EntityRef] = None
    department: Optional[EntityRef] = None
    fee_structure: FeeStructure = field(default_factory=FeeStructure)
    thumbnail_url: Optional[str] = None
    duration: Optional[str] = None
    seats: Optional[int] = None
    schedule: Optional[str] = None
    syllabus: Optional[str] = None
    form_url: Optional[str] = None
    created_at: Optional[str] = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


@dataclass(frozen=True)
class Faculty:
    """
    A faculty member. department holds the department's display name,
    not an id (that is how the backend stores it).
    """

    id: Optional[str]
    name: str
    department: Optional[str] = None
    designation: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    bio: Optional[str] = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def record_id(record: Any) -> Optional[str]:
    """
    Return the identifier of a record. The backend uses Mongo's "_id",
    some endpoints also send "id".
    """
    if not isinstance(record, dict):
        return None
    return _text(record.get("_id")) or _text(record.get("id"))


def _number(value: Any) -> Optional[float]:
    # NaN, inf and overflowing literals ("1e400") count as missing
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            n = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            n = float(value.replace(",", "").strip())
        except ValueError:
            return None
    else:
        return None
    return n if math.isfinite(n) else None


def _int(value: Any) -> Optional[int]:
    n = _number(value)
    return int(n) if n is not None else None


# ---------------------------------------------------------------------------
# Normalization (wire record -> entity)
# ---------------------------------------------------------------------------


def entity_ref(value: Any) -> Optional[EntityRef]:
    """
    Normalize a categoryId/departmentId value.

    Accepted shapes:
        "c1"                          -> EntityRef("c1")
        {"_id": "c1", "name": "Sci"}  -> EntityRef("c1", "Sci")
        {"name": "Sci"}               -> EntityRef(None, "Sci")
    Anything else (None, "", {}, numbers inside lists, ...) -> None.
    """
    if isinstance(value, dict):
        ref_id = record_id(value)
        name = _text(value.get("name"))
        if ref_id is None and name is None:
            return None
        return EntityRef(id=ref_id, name=name)
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        ref_id = _text(value)
        return EntityRef(id=ref_id) if ref_id else None
    return None


def category_from_record(record: dict[str, Any]) -> Optional[Category]:
    cid = record_id(record)
    if cid is None:
        return None
    return Category(
        id=cid,
        name=_text(record.get("name")) or "",
        description=_text(record.get("description")) or "",
        raw=record,
    )


def department_from_record(record: dict[str, Any]) -> Optional[Department]:
    """
    A department needs at least an id or a name; legacy responses sometimes
    carry only the name.
    """
    did = record_id(record)
    name = _text(record.get("name"))
    if did is None and name is None:
        return None
    return Department(
        id=did,
        name=name or "",
        description=_text(record.get("description")) or "",
        raw=record,
    )


def course_from_record(record: dict[str, Any]) -> Optional[Course]:
    cid = record_id(record)
    if cid is None:
        return None

    fees_raw = record.get("feeStructure")
    if isinstance(fees_raw, dict):
        fees = FeeStructure(
            registration_fee=_number(fees_raw.get("registrationFee")),
            full_fee=_number(fees_raw.get("fullFee")),
        )
    else:
        fees = FeeStructure()

    return Course(
        id=cid,
        name=_text(record.get("name")) or "",
        description=_text(record.get("description")) or "",
        category=entity_ref(record.get("categoryId")),
        department=entity_ref(record.get("departmentId")),
        fee_structure=fees,
        thumbnail_url=_text(record.get("thumbnailUrl")),
        duration=_text(record.get("duration")),
        seats=_int(record.get("seats")),
        schedule=_text(record.get("schedule")),
        syllabus=_text(record.get("syllabus")),
        form_url=_text(record.get("formUrl")),
        created_at=_text(record.get("createdAt")),
        raw=record,
    )


def faculty_from_record(record: dict[str, Any]) -> Optional[Faculty]:
    name = _text(record.get("name"))
    fid = record_id(record)
    if name is None and fid is None:
        return None
    return Faculty(
        id=fid,
        name=name or "",
        department=_text(record.get("department")),
        designation=_text(record.get("designation")),
        email=_text(record.get("email")),
        phone=_text(record.get("phone")),
        bio=_text(record.get("bio")),
        raw=record,
    )


# ---------------------------------------------------------------------------
# Response envelopes
# ---------------------------------------------------------------------------


def unwrap_list(payload: Any) -> list[Any]:
    """
    Return the list inside a response.

    [..]                -> [..]
    {"data": [..]}      -> [..]
    anything else       -> []
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        data = payload.get("data")
        if isinstance(data, list):
            return data
    return []


def unwrap_record(payload: Any) -> Optional[dict[str, Any]]:
    """
    Return the record inside a response: the "data" mapping of an envelope,
    or the payload itself when it already is a record.
    """
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if isinstance(data, dict):
        return data
    if "data" in payload and "success" in payload:
        # envelope without a usable record
        return None
    return payload


def normalize_list(payload: Any, convert: Callable[[dict[str, Any]], Optional[T]]) -> list[T]:
    """
    Convert a collection response (bare list or envelope), keeping server
    order. Non-dict entries and records the converter rejects are skipped.
    """
    out: list[T] = []
    for r in unwrap_list(payload):
        if not isinstance(r, dict):
            continue
        item = convert(r)
        if item is not None:
            out.append(item)
    return out
