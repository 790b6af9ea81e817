import logging
import uuid

from flask import abort
from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import InvalidTokenError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.security import check_password_hash, generate_password_hash

from ..errors import AuthError, EmailInUseError, NotFoundError, StoreError, ValidationError
from ..extensions import db
from ..models import Department, Student

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
SIGNUP_TEXT_FIELDS = ("first_name", "last_name", "email", "password")


def _text(payload: dict, key: str):
    """String field from a JSON body, stripped; None when absent."""
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value.strip()


def _integer(value, key: str):
    if isinstance(value, bool):
        raise ValidationError(f"{key} must be a number")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number")


def create_student(payload: dict) -> Student:
    data = {k: _text(payload, k) for k in SIGNUP_TEXT_FIELDS}
    department = payload.get("department")
    missing = [k for k, v in data.items() if not v]
    if department in (None, ""):
        missing.append("department")
    if missing:
        raise ValidationError(f"Missing field(s): {', '.join(missing)}")
    if len(payload["password"]) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    email = data["email"].lower()
    if Student.query.filter_by(email=email).first() is not None:
        raise EmailInUseError()

    department_id = _integer(department, "department")
    if db.session.get(Department, department_id) is None:
        raise NotFoundError("Department not found")

    age = payload.get("age")
    age = None if age in (None, "") else _integer(age, "age")
    phone_number = _text(payload, "phonenumber") or _text(payload, "phone_number")

    student = Student(
        first_name=data["first_name"],
        last_name=data["last_name"],
        matric=str(uuid.uuid4()),
        email=email,
        password_hash=generate_password_hash(payload["password"]),
        department_id=department_id,
        phone_number=phone_number or None,
        age=age,
        level="100",
    )
    db.session.add(student)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise EmailInUseError()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Signup error: {e}", exc_info=True)
        raise StoreError()
    logger.info("Created student %s (%s)", student.id, student.email)
    return student


def _string_or_empty(value, key: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{key} must be a string")
    return value


def authenticate(email: str, password: str) -> Student:
    email = _string_or_empty(email, "email").strip().lower()
    password = _string_or_empty(password, "password")
    student = Student.query.filter_by(email=email).one_or_none()
    if student is None or not check_password_hash(student.password_hash, password):
        raise AuthError("Invalid email or password")
    return student


def issue_token(student: Student) -> str:
    return create_access_token(identity=str(student.id),
                               additional_claims={"email": student.email})


def load_student_from_request(request):
    """Flask-Login request loader reading the bearer credential from the ``token`` cookie."""
    token = request.cookies.get("token")
    if not token:
        return None
    try:
        payload = decode_token(token)
    except (InvalidTokenError, JWTExtendedException) as e:
        logger.info("Rejected token: %s", e)
        abort(403, description="Invalid token")

    try:
        student_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        abort(403, description="Invalid token")
    student = db.session.get(Student, student_id)
    if student is None:
        raise NotFoundError("Student not found")
    return student


def change_password(student: Student, old: str, new: str):
    old = _string_or_empty(old, "old_password")
    new = _string_or_empty(new, "new_password")
    if not check_password_hash(student.password_hash, old):
        raise ValidationError("Current password is incorrect")
    if len(new) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters")
    student.password_hash = generate_password_hash(new)
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Password change error: {e}", exc_info=True)
        raise StoreError()
