from datetime import datetime, timezone
from flask_login import UserMixin
from ..extensions import db

class Department(db.Model):
    __tablename__ = "department"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), unique=True, nullable=False)

    students = db.relationship("Student", back_populates="department")
    offerings = db.relationship("DepartmentalCourse", back_populates="department")

class Student(UserMixin, db.Model):
    __tablename__ = "student"
    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(64), nullable=False)
    last_name = db.Column(db.String(64), nullable=False)
    matric = db.Column(db.String(36), unique=True, nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    department_id = db.Column(db.Integer, db.ForeignKey("department.id"), nullable=False)
    level = db.Column(db.String(3), nullable=False, default="100")   # "100".."500"
    phone_number = db.Column(db.String(32))
    age = db.Column(db.Integer)
    created_at = db.Column(db.DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))

    department = db.relationship("Department", back_populates="students")
    registrations = db.relationship("CourseRegistration", back_populates="student")
    grades = db.relationship("CourseGrade", back_populates="student")

    @property
    def name(self):
        return f"{self.first_name} {self.last_name}"

    def to_dict(self):
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "matric": self.matric,
            "email": self.email,
            "department_id": self.department_id,
            "department": self.department.name if self.department else None,
            "level": self.level,
            "phone_number": self.phone_number,
            "age": self.age,
        }
