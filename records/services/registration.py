"""
Course registration for a student's cohort.

The cohort (department, level) always comes from the stored student record.
Compulsory offerings for the active term are merged with the student's
elective picks, and the whole set is written in one transaction.
"""

import logging
from typing import FrozenSet, Iterable, List, NamedTuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import selectinload

from ..errors import ConflictError, EmptyRegistrationError, NotFoundError, StoreError
from ..extensions import db
from ..models import COMPULSORY, Course, CourseRegistration, DepartmentalCourse, Student

logger = logging.getLogger(__name__)


class RegistrationResult(NamedTuple):
    term: str
    course_ids: FrozenSet[str]
    registered: List[CourseRegistration]
    already_registered: List[str]


def compute_registration_set(compulsory_ids: Iterable[str],
                             elective_ids: Iterable[str]) -> FrozenSet[str]:
    return frozenset(compulsory_ids) | frozenset(elective_ids)


def offerings_for(student: Student, term: str, mode: str = None) -> List[DepartmentalCourse]:
    q = (
        DepartmentalCourse.query.join(Course)
        .options(selectinload(DepartmentalCourse.course))
        .filter(
            DepartmentalCourse.department_id == student.department_id,
            DepartmentalCourse.level == student.level,
            DepartmentalCourse.term == term,
        )
        .order_by(DepartmentalCourse.course_id)
    )
    if mode:
        q = q.filter(DepartmentalCourse.mode == mode)
    return q.all()


def compulsory_course_ids(student: Student, term: str) -> List[str]:
    return [o.course_id for o in offerings_for(student, term, COMPULSORY)]


def registrations_for(student: Student, term: str) -> List[CourseRegistration]:
    return (CourseRegistration.query
            .filter_by(student_id=student.id, term=term)
            .order_by(CourseRegistration.course_id)
            .all())


def _register_once(student: Student, elective_ids: FrozenSet[str], term: str):
    # Row lock serializes concurrent submissions for the same student.
    locked = (Student.query.filter_by(id=student.id)
              .with_for_update().one_or_none())
    if locked is None:
        raise NotFoundError("Student not found")

    course_ids = compute_registration_set(compulsory_course_ids(locked, term), elective_ids)
    if not course_ids:
        raise EmptyRegistrationError()

    known = {cid for (cid,) in db.session.query(Course.id)
             .filter(Course.id.in_(course_ids))}
    missing = sorted(course_ids - known)
    if missing:
        raise NotFoundError(f"Unknown course(s): {', '.join(missing)}")

    existing = {cid for (cid,) in db.session.query(CourseRegistration.course_id)
                .filter(CourseRegistration.student_id == locked.id,
                        CourseRegistration.term == term,
                        CourseRegistration.course_id.in_(course_ids))}
    new_rows = [CourseRegistration(student_id=locked.id, course_id=cid, term=term)
                for cid in sorted(course_ids - existing)]
    db.session.add_all(new_rows)
    db.session.commit()
    return RegistrationResult(term=term, course_ids=course_ids,
                              registered=new_rows, already_registered=sorted(existing))


def register_courses(student: Student, elective_ids: Iterable[str], term: str) -> RegistrationResult:
    """
    Register ``student`` for their compulsory courses plus ``elective_ids``.

    Pairs already registered for ``term`` are skipped and reported in
    ``already_registered``. Either every new row is committed or none is.
    A unique-constraint clash means another submission for the same pairs
    committed first; the unit is run once more so those pairs are reported
    as already registered. A second clash is a ``ConflictError``.
    """
    student_id = student.id
    elective_ids = frozenset(elective_ids)
    for attempt in (1, 2):
        try:
            result = _register_once(student, elective_ids, term)
            break
        except (NotFoundError, EmptyRegistrationError):
            db.session.rollback()
            raise
        except IntegrityError:
            db.session.rollback()
            logger.warning("Concurrent registration for student %s in term %s (attempt %d)",
                           student_id, term, attempt)
            if attempt == 2:
                raise ConflictError("Registration already in progress for this student")
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Register courses error: {e}", exc_info=True)
            raise StoreError("Could not register courses")

    logger.info("Student %s registered %d course(s) for term %s (%d already present)",
                student_id, len(result.registered), term, len(result.already_registered))
    return result
