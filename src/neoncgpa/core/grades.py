import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple


WITHDRAWN_GRADE = "FR"

GRADE_POINTS: Dict[str, int] = {
    "A+": 10,
    "A": 9,
    "B+": 8,
    "B": 7,
    "C+": 6,
    "C": 5,
    "D": 4,
    "F": 0,
}

# Choices offered by the grade selector, blank first.
GRADE_CHOICES: Tuple[str, ...] = ("", *GRADE_POINTS, WITHDRAWN_GRADE)

# Inclusive lower bounds, highest first.
MARK_THRESHOLDS: Tuple[Tuple[float, str], ...] = (
    (91, "A+"),
    (81, "A"),
    (71, "B+"),
    (61, "B"),
    (51, "C+"),
    (46, "C"),
    (40, "D"),
)


@dataclass(frozen=True)
class GradePoint:
    gp: Optional[float]
    excluded: bool = False

    @property
    def counts(self) -> bool:
        return self.gp is not None and not self.excluded


class GradeStatus(Enum):
    GRADED = "graded"
    WITHDRAWN = "withdrawn"
    UNGRADED = "ungraded"


def to_number(value: Any) -> Optional[float]:
    """
    Lenient numeric parsing for user-entered fields.
    Returns None for None, blank strings, booleans, NaN and anything float() rejects.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number):
        return None
    return number


def _normalize(grade: Any) -> str:
    if grade is None:
        return ""
    return str(grade).strip().upper()


def is_withdrawn_grade(grade: Any) -> bool:
    return _normalize(grade) == WITHDRAWN_GRADE


def grade_to_gp(grade: Any, is_fr: bool = False) -> GradePoint:
    if is_fr or is_withdrawn_grade(grade):
        return GradePoint(gp=0, excluded=True)
    letter = _normalize(grade)
    if not letter:
        return GradePoint(gp=None)
    return GradePoint(gp=GRADE_POINTS.get(letter))


def marks_to_grade(marks: Any) -> Optional[str]:
    score = to_number(marks)
    if score is None:
        return None
    for lower_bound, letter in MARK_THRESHOLDS:
        if score >= lower_bound:
            return letter
    return "F"


def effective_grade(grade: Any, marks: Any) -> Optional[str]:
    """An explicit grade always wins; marks are only consulted when the grade is blank."""
    if grade is not None and str(grade).strip():
        return str(grade)
    return marks_to_grade(marks)


def resolve_grade_point(grade: Any, marks: Any, is_fr: bool = False) -> GradePoint:
    return grade_to_gp(effective_grade(grade, marks), is_fr)


def grade_status(grade: Any, marks: Any, is_fr: bool = False) -> Tuple[GradeStatus, Optional[str]]:
    if is_fr or is_withdrawn_grade(grade):
        return GradeStatus.WITHDRAWN, WITHDRAWN_GRADE
    letter = effective_grade(grade, marks)
    if letter is None or grade_to_gp(letter).gp is None:
        return GradeStatus.UNGRADED, None
    return GradeStatus.GRADED, _normalize(letter)
