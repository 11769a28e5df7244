from dataclasses import dataclass
from typing import Any, Iterable, List, Protocol, Tuple

from neoncgpa.core.grades import GradePoint, resolve_grade_point, to_number


TREND_WIDTH = 300
TREND_HEIGHT = 80
MAX_GRADE_POINT = 10


class SubjectLike(Protocol):
    grade: Any
    marks: Any
    credits: Any
    is_fr: bool


class SemesterLike(Protocol):
    subjects: Iterable[SubjectLike]


@dataclass(frozen=True)
class SemesterStats:
    gpa: float
    credits: float

    @property
    def has_data(self) -> bool:
        return self.credits > 0


@dataclass(frozen=True)
class OverallStats:
    cgpa: float
    percent: float
    total_credits: float


def subject_grade_point(subject: SubjectLike) -> GradePoint:
    return resolve_grade_point(subject.grade, subject.marks, subject.is_fr)


def accumulate(subjects: Iterable[SubjectLike]) -> Tuple[float, float]:
    """
    Returns (counted_credits, credit_points). A subject counts only when it
    resolves to a non-excluded grade point and its credits parse to > 0.
    """
    total_credits = 0.0
    total_points = 0.0

    for subject in subjects:
        result = subject_grade_point(subject)
        credits = to_number(subject.credits)
        if not result.counts or credits is None or credits <= 0:
            continue
        total_credits += credits
        total_points += credits * result.gp

    return total_credits, total_points


def semester_stats(semester: SemesterLike) -> SemesterStats:
    credits, points = accumulate(semester.subjects)
    return SemesterStats(gpa=points / credits if credits else 0.0, credits=credits)


def to_percent(cgpa: float) -> float:
    return (cgpa - 0.5) * 10


def overall_stats(semesters: Iterable[SemesterLike]) -> OverallStats:
    # One flattened pass so low-credit semesters carry their true weight.
    credits, points = accumulate(subject for semester in semesters for subject in semester.subjects)
    if not credits:
        return OverallStats(cgpa=0.0, percent=0.0, total_credits=0.0)
    cgpa = points / credits
    return OverallStats(cgpa=cgpa, percent=to_percent(cgpa), total_credits=credits)


def gpa_trend(semesters: Iterable[SemesterLike]) -> List[float]:
    trend = []
    for semester in semesters:
        stats = semester_stats(semester)
        if stats.has_data:
            trend.append(stats.gpa)
    return trend


def trend_points(
    values: List[float],
    *,
    width: float = TREND_WIDTH,
    height: float = TREND_HEIGHT,
) -> List[Tuple[float, float]]:
    """Chart coordinates for the GPA trend; empty when there are fewer than two points."""
    if len(values) < 2:
        return []
    last = len(values) - 1
    return [
        (index / last * width, height - (value / MAX_GRADE_POINT) * height)
        for index, value in enumerate(values)
    ]
