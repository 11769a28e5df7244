"""JSON snapshot codec shared by local persistence and file import/export."""

import json
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from neoncgpa.state.session_state import Semester, Session, Subject, from_semesters


class SnapshotError(Exception):
    pass


class SubjectRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: Optional[str] = ""
    credits: Union[int, float, str, None] = 3
    grade: Optional[str] = ""
    marks: Union[int, float, str, None] = ""
    is_fr: Optional[bool] = Field(default=False, alias="isFR")

    @field_validator("name", "grade", mode="after")
    @classmethod
    def _blank_for_null(cls, value: Optional[str]) -> str:
        return "" if value is None else value

    @field_validator("is_fr", mode="after")
    @classmethod
    def _false_for_null(cls, value: Optional[bool]) -> bool:
        return bool(value)


class SemesterRecord(BaseModel):
    id: int
    subjects: List[SubjectRecord] = Field(default_factory=list)


_SNAPSHOT = TypeAdapter(List[SemesterRecord])


def _to_domain(records: List[SemesterRecord]) -> Session:
    return from_semesters(
        Semester(
            id=record.id,
            subjects=tuple(
                Subject(
                    id=sub.id,
                    name=sub.name,
                    credits=sub.credits,
                    grade=sub.grade,
                    marks=sub.marks,
                    is_fr=sub.is_fr,
                )
                for sub in record.subjects
            ),
        )
        for record in records
    )


def _to_records(session: Session) -> List[SemesterRecord]:
    return [
        SemesterRecord(
            id=semester.id,
            subjects=[
                SubjectRecord(
                    id=sub.id,
                    name=sub.name,
                    credits=sub.credits,
                    grade=sub.grade,
                    marks=sub.marks,
                    is_fr=sub.is_fr,
                )
                for sub in semester.subjects
            ],
        )
        for semester in session.semesters
    ]


def dump_session(session: Session, *, indent: Union[int, None] = None) -> str:
    payload = [record.model_dump(by_alias=True) for record in _to_records(session)]
    return json.dumps(payload, indent=indent)


def load_session(raw: Union[str, bytes]) -> Session:
    """
    Parses a snapshot (a JSON list of semesters) into a Session.
    Raises SnapshotError when the text is not JSON or not shaped like a snapshot.
    """
    try:
        records = _SNAPSHOT.validate_json(raw)
    except ValidationError as exc:
        raise SnapshotError(f"Invalid snapshot: {exc.error_count()} problem(s) found") from exc
    return _to_domain(records)
