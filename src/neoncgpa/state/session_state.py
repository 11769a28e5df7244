from dataclasses import dataclass, replace
from typing import Any, Iterable, Tuple, Union

from neoncgpa.core.grades import WITHDRAWN_GRADE, GradeStatus, grade_status, is_withdrawn_grade


DEFAULT_CREDITS = 3
DEFAULT_SUBJECTS_FIRST_SEMESTER = 3
DEFAULT_SUBJECTS_NEW_SEMESTER = 2

# Credits and marks are kept as entered (number or text); parsing happens in the grade engine.
FieldValue = Union[str, float, int, bool, None]

EDITABLE_FIELDS = ("name", "credits", "grade", "marks", "is_fr")
FIELD_ALIASES = {"isFR": "is_fr"}


class SessionStateError(Exception):
    pass


@dataclass(frozen=True)
class Subject:
    id: int
    name: str = ""
    credits: FieldValue = DEFAULT_CREDITS
    grade: str = ""
    marks: FieldValue = ""
    is_fr: bool = False

    @property
    def status(self) -> GradeStatus:
        return grade_status(self.grade, self.marks, self.is_fr)[0]


@dataclass(frozen=True)
class Semester:
    id: int
    subjects: Tuple[Subject, ...] = ()


@dataclass(frozen=True)
class Session:
    semesters: Tuple[Semester, ...] = ()
    next_semester_id: int = 1
    next_subject_id: int = 1

    def find_semester(self, semester_id: int) -> Semester:
        for semester in self.semesters:
            if semester.id == semester_id:
                return semester
        raise SessionStateError(f"Unknown semester id: {semester_id}")

    def find_subject(self, semester_id: int, subject_id: int) -> Subject:
        for subject in self.find_semester(semester_id).subjects:
            if subject.id == subject_id:
                return subject
        raise SessionStateError(f"Unknown subject id {subject_id} in semester {semester_id}")


def from_semesters(semesters: Iterable[Semester]) -> Session:
    """Builds a session and derives the next-ID counters as max(existing) + 1."""
    semesters = tuple(semesters)
    max_semester_id = max((s.id for s in semesters), default=0)
    max_subject_id = max((sub.id for s in semesters for sub in s.subjects), default=0)
    return Session(
        semesters=semesters,
        next_semester_id=max_semester_id + 1,
        next_subject_id=max_subject_id + 1,
    )


def _new_subjects(session: Session, count: int) -> Tuple[Tuple[Subject, ...], int]:
    first = session.next_subject_id
    subjects = tuple(Subject(id=first + offset) for offset in range(count))
    return subjects, first + count


def default_session() -> Session:
    subjects, next_subject_id = _new_subjects(Session(), DEFAULT_SUBJECTS_FIRST_SEMESTER)
    return Session(
        semesters=(Semester(id=1, subjects=subjects),),
        next_semester_id=2,
        next_subject_id=next_subject_id,
    )


def _replace_semester(session: Session, updated: Semester) -> Tuple[Semester, ...]:
    return tuple(updated if s.id == updated.id else s for s in session.semesters)


def add_subject(session: Session, semester_id: int) -> Session:
    semester = session.find_semester(semester_id)
    subjects, next_subject_id = _new_subjects(session, 1)
    updated = replace(semester, subjects=semester.subjects + subjects)
    return replace(session, semesters=_replace_semester(session, updated), next_subject_id=next_subject_id)


def remove_subject(session: Session, semester_id: int, subject_id: int) -> Session:
    semester = session.find_semester(semester_id)
    updated = replace(semester, subjects=tuple(s for s in semester.subjects if s.id != subject_id))
    return replace(session, semesters=_replace_semester(session, updated))


def add_semester(session: Session) -> Session:
    subjects, next_subject_id = _new_subjects(session, DEFAULT_SUBJECTS_NEW_SEMESTER)
    semester = Semester(id=session.next_semester_id, subjects=subjects)
    return replace(
        session,
        semesters=session.semesters + (semester,),
        next_semester_id=session.next_semester_id + 1,
        next_subject_id=next_subject_id,
    )


def remove_semester(session: Session, semester_id: int) -> Session:
    return replace(session, semesters=tuple(s for s in session.semesters if s.id != semester_id))


def _apply_field(subject: Subject, field_name: str, value: Any) -> Subject:
    if field_name == "grade":
        grade = "" if value is None else str(value)
        if is_withdrawn_grade(grade):
            return replace(subject, grade=WITHDRAWN_GRADE, is_fr=True)
        return replace(subject, grade=grade, is_fr=False)

    if field_name == "is_fr":
        if value:
            return replace(subject, grade=WITHDRAWN_GRADE, is_fr=True)
        grade = "" if is_withdrawn_grade(subject.grade) else subject.grade
        return replace(subject, grade=grade, is_fr=False)

    if field_name == "name":
        return replace(subject, name="" if value is None else str(value))

    return replace(subject, **{field_name: value})


def update_subject(
    session: Session,
    semester_id: int,
    subject_id: int,
    field_name: str,
    value: Any,
) -> Session:
    """
    Sets one editable field and keeps grade/FR consistent:
    grade 'FR' implies is_fr and is_fr implies grade 'FR'. Leaving the FR
    state from either side clears the other half.
    """
    field_name = FIELD_ALIASES.get(field_name, field_name)
    if field_name not in EDITABLE_FIELDS:
        raise SessionStateError(f"Field is not editable: {field_name}")

    semester = session.find_semester(semester_id)
    subject = session.find_subject(semester_id, subject_id)
    updated_subject = _apply_field(subject, field_name, value)
    updated = replace(
        semester,
        subjects=tuple(updated_subject if s.id == subject_id else s for s in semester.subjects),
    )
    return replace(session, semesters=_replace_semester(session, updated))

