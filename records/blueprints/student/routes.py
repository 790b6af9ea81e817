import logging
from flask import current_app, jsonify, send_file
from flask_login import login_required, current_user
from io import BytesIO
from ...errors import ValidationError
from ...models import COMPULSORY, ELECTIVE
from ...services import current_term, term_order
from ...services.auth import change_password
from ...services.grading import compute_cgpa, graded_rows
from ...services.registration import offerings_for, register_courses, registrations_for
from ...services.transcript import DocumentSink, build_transcript, render_transcript
from .. import json_body
from . import bp

logger = logging.getLogger(__name__)

def get_current_student():
    return current_user._get_current_object()

@bp.get("/profile")
@login_required
def profile():
    return jsonify(get_current_student().to_dict())

@bp.get("/offerable-courses")
@login_required
def offerable_courses():
    stu = get_current_student()
    term = current_term()
    offerings = offerings_for(stu, term)
    return jsonify({
        "term": term,
        "compulsory": [o.to_dict() for o in offerings if o.mode == COMPULSORY],
        "electives": [o.to_dict() for o in offerings if o.mode == ELECTIVE],
    })

@bp.post("/register-courses")
@login_required
def register():
    payload = json_body()
    electives = payload.get("electiveCourseIds", [])
    if not isinstance(electives, list) or not all(isinstance(c, str) for c in electives):
        raise ValidationError("electiveCourseIds must be a list of course ids")
    electives = [c.strip() for c in electives if c.strip()]

    result = register_courses(get_current_student(), electives, current_term())
    status = 201 if result.registered else 200
    return jsonify({
        "term": result.term,
        "courseIds": sorted(result.course_ids),
        "registrations": [r.to_dict() for r in result.registered],
        "alreadyRegistered": result.already_registered,
    }), status

@bp.get("/registrations")
@login_required
def my_registrations():
    term = current_term()
    rows = registrations_for(get_current_student(), term)
    return jsonify({"term": term, "registrations": [r.to_dict() for r in rows]})

@bp.get("/cgpa")
@login_required
def cgpa():
    summary = compute_cgpa(graded_rows(get_current_student().id))
    return jsonify({"cgpa": summary.cgpa, "totalUnits": summary.total_units})

@bp.get("/transcript")
@login_required
def transcript():
    stu = get_current_student()
    doc = build_transcript(stu, graded_rows(stu.id), term_order=term_order())
    pdf = render_transcript(
        doc, DocumentSink(),
        institution=current_app.config["TRANSCRIPT_INSTITUTION"],
        signature_image=current_app.config.get("TRANSCRIPT_SIGNATURE_IMAGE"),
    )
    logger.info("Transcript generated for student %s (%d bytes)", stu.id, len(pdf))
    return send_file(BytesIO(pdf), mimetype="application/pdf",
                     as_attachment=True, download_name="transcript.pdf")

@bp.post("/account/password")
@login_required
def account_password():
    payload = json_body()
    change_password(get_current_student(), payload.get("old_password"), payload.get("new_password"))
    return jsonify({"message": "Password updated"})
