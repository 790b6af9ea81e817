"""
Test configuration and fixtures.

Each test gets a fresh app on in-memory SQLite. Seed fixtures commit inside
their own app context and hand back plain values, so requests made through
the test client always load fresh state.
"""
import pytest
from faker import Faker
from werkzeug.security import generate_password_hash

from records import create_app
from records.extensions import db
from records.models import (
    Course, CourseGrade, Department, DepartmentalCourse, Student, COMPULSORY, ELECTIVE,
)

fake = Faker()

PASSWORD = "testpassword123"


@pytest.fixture
def app():
    app = create_app("config.TestConfig")
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db_session(app):
    """App context for calling services directly"""
    with app.app_context():
        yield db.session


@pytest.fixture
def catalog(app):
    """Computer Science, level 100: two compulsory and two elective courses in the 1st term."""
    with app.app_context():
        cs = Department(name="Computer Science")
        db.session.add(cs)
        db.session.add_all([
            Course(id="CSC101", name="Introduction to Computing", unit=3),
            Course(id="CSC102", name="Programming Fundamentals", unit=3),
            Course(id="ENG203", name="Technical Writing", unit=2),
            Course(id="MTH201", name="Linear Algebra", unit=4),
            Course(id="CSC201", name="Data Structures", unit=3),
        ])
        db.session.flush()
        db.session.add_all([
            DepartmentalCourse(department_id=cs.id, course_id="CSC101", level="100", term="1st", mode=COMPULSORY),
            DepartmentalCourse(department_id=cs.id, course_id="CSC102", level="100", term="1st", mode=COMPULSORY),
            DepartmentalCourse(department_id=cs.id, course_id="ENG203", level="100", term="1st", mode=ELECTIVE),
            DepartmentalCourse(department_id=cs.id, course_id="MTH201", level="100", term="1st", mode=ELECTIVE),
            DepartmentalCourse(department_id=cs.id, course_id="CSC201", level="100", term="2nd", mode=COMPULSORY),
            DepartmentalCourse(department_id=cs.id, course_id="MTH201", level="200", term="1st", mode=COMPULSORY),
        ])
        db.session.commit()
        return {"department_id": cs.id}


@pytest.fixture
def make_student(app, catalog):
    def _make(level="100", password=PASSWORD):
        with app.app_context():
            s = Student(
                first_name=fake.first_name(),
                last_name=fake.last_name(),
                matric=fake.uuid4(),
                email=fake.unique.email(),
                password_hash=generate_password_hash(password),
                department_id=catalog["department_id"],
                level=level,
            )
            db.session.add(s)
            db.session.commit()
            return {"id": s.id, "email": s.email, "password": password}
    return _make


@pytest.fixture
def student(make_student):
    return make_student()


@pytest.fixture
def add_grades(app):
    def _add(student_id, rows):
        """rows: (course_id, term, grade, score) tuples"""
        with app.app_context():
            db.session.add_all([
                CourseGrade(student_id=student_id, course_id=c, term=t, grade=g, score=s)
                for c, t, g, s in rows
            ])
            db.session.commit()
    return _add


@pytest.fixture
def auth_client(client, student):
    resp = client.post("/auth/login", json={"email": student["email"], "password": student["password"]})
    assert resp.status_code == 200
    return client
