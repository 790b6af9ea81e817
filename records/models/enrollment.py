from datetime import datetime, timezone
from ..extensions import db

class CourseRegistration(db.Model):
    __tablename__ = "student_course_registration"
    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id"), nullable=False)
    course_id = db.Column(db.String(16), db.ForeignKey("course.id"), nullable=False)
    term = db.Column(db.String(16), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))
    __table_args__ = (
        db.UniqueConstraint("student_id", "course_id", "term", name="uq_student_course_term"),
    )

    student = db.relationship("Student", back_populates="registrations")
    course = db.relationship("Course")

    def to_dict(self):
        return {
            "id": self.id,
            "student_id": self.student_id,
            "course_id": self.course_id,
            "term": self.term,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

class CourseGrade(db.Model):
    """Written by the grading process; read-only here."""
    __tablename__ = "student_course_grade"
    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey("student.id"), nullable=False)
    course_id = db.Column(db.String(16), db.ForeignKey("course.id"), nullable=False)
    term = db.Column(db.String(16), nullable=False)
    grade = db.Column(db.String(2))        # A..F, null until graded
    score = db.Column(db.Float)
    __table_args__ = (
        db.UniqueConstraint("student_id", "course_id", "term", name="uq_grade_student_course_term"),
    )

    student = db.relationship("Student", back_populates="grades")
    course = db.relationship("Course")
