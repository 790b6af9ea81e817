"""
Grade aggregation: letter grades weighted by course unit into a CGPA.
"""

from typing import Iterable, NamedTuple, Optional

from ..extensions import db
from ..models import Course, CourseGrade

GRADE_POINTS = {"A": 5, "B": 4, "C": 3, "D": 2, "E": 1, "F": 0}


class GradeRow(NamedTuple):
    course_id: str
    course_name: str
    unit: int
    term: str
    grade: Optional[str]
    score: Optional[float] = None


class CgpaSummary(NamedTuple):
    cgpa: float
    total_units: int
    total_points: int


def grade_point(letter: Optional[str]) -> int:
    """Points for a letter grade; unknown or missing letters count as 0."""
    return GRADE_POINTS.get(letter, 0)


def compute_cgpa(rows: Iterable) -> CgpaSummary:
    """
    Unit-weighted grade point average over ``rows``.

    Each row needs ``grade`` and ``unit`` attributes. Ungraded rows must be
    filtered out by the caller. With zero total units the CGPA is 0.
    """
    total_points = 0
    total_units = 0
    for row in rows:
        total_points += grade_point(row.grade) * row.unit
        total_units += row.unit

    cgpa = total_points / total_units if total_units > 0 else 0
    return CgpaSummary(cgpa=cgpa, total_units=total_units, total_points=total_points)


def graded_rows(student_id: int) -> list:
    """All graded course rows for a student, joined with the course catalog."""
    q = (
        db.session.query(
            CourseGrade.course_id, Course.name, Course.unit,
            CourseGrade.term, CourseGrade.grade, CourseGrade.score,
        )
        .join(Course, CourseGrade.course_id == Course.id)
        .filter(CourseGrade.student_id == student_id, CourseGrade.grade.isnot(None))
        .order_by(CourseGrade.id)
    )
    return [GradeRow(*r) for r in q.all()]
