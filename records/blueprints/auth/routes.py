from flask import jsonify
from flask_jwt_extended import set_access_cookies, unset_jwt_cookies
from .. import json_body
from ...services.auth import authenticate, create_student, issue_token
from . import bp

@bp.post("/signup")
def signup():
    payload = json_body()
    student = create_student(payload)
    return jsonify({"user": student.to_dict()}), 201

@bp.post("/login")
def login():
    payload = json_body()
    student = authenticate(payload.get("email"), payload.get("password"))
    token = issue_token(student)
    resp = jsonify({"token": token, "user": student.to_dict()})
    set_access_cookies(resp, token)
    return resp

@bp.post("/logout")
def logout():
    resp = jsonify({"message": "Logged out successfully"})
    unset_jwt_cookies(resp)
    return resp
