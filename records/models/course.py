from ..extensions import db

COMPULSORY = "compulsory"
ELECTIVE = "elective"

class Course(db.Model):
    __tablename__ = "course"
    id = db.Column(db.String(16), primary_key=True)   # course code, e.g. "CSC101"
    name = db.Column(db.String(128), nullable=False)
    unit = db.Column(db.Integer, nullable=False)
    __table_args__ = (
        db.CheckConstraint("unit > 0", name="ck_course_unit_positive"),
    )

    offerings = db.relationship("DepartmentalCourse", back_populates="course")

class DepartmentalCourse(db.Model):
    __tablename__ = "departmental_course"
    id = db.Column(db.Integer, primary_key=True)
    department_id = db.Column(db.Integer, db.ForeignKey("department.id"), nullable=False)
    course_id = db.Column(db.String(16), db.ForeignKey("course.id"), nullable=False)
    level = db.Column(db.String(3), nullable=False)
    term = db.Column(db.String(16), nullable=False)   # "1st" / "2nd"
    mode = db.Column(db.String(16), nullable=False)
    __table_args__ = (
        db.UniqueConstraint("department_id", "course_id", "level", "term",
                            name="uq_offering"),
        db.CheckConstraint("mode IN ('compulsory', 'elective')", name="ck_offering_mode"),
    )

    department = db.relationship("Department", back_populates="offerings")
    course = db.relationship("Course", back_populates="offerings")

    def to_dict(self):
        return {
            "course_id": self.course_id,
            "course_name": self.course.name,
            "unit": self.course.unit,
            "term": self.term,
            "mode": self.mode,
        }
