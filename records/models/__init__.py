from ..extensions import db
from .people import Department, Student
from .course import Course, DepartmentalCourse, COMPULSORY, ELECTIVE
from .enrollment import CourseRegistration, CourseGrade

__all__ = [
    "Department", "Student", "Course", "DepartmentalCourse",
    "CourseRegistration", "CourseGrade", "COMPULSORY", "ELECTIVE",
]
