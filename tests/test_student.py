"""
Tests for the student endpoints
"""
from records.extensions import db
from records.models import CourseRegistration


class TestProfile:

    def test_profile(self, auth_client, student):
        resp = auth_client.get("/student/profile")

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["email"] == student["email"]
        assert body["department"] == "Computer Science"


class TestOfferableCourses:

    def test_split_by_mode_for_current_term(self, auth_client):
        body = auth_client.get("/student/offerable-courses").get_json()

        assert body["term"] == "1st"
        assert [c["course_id"] for c in body["compulsory"]] == ["CSC101", "CSC102"]
        assert [c["course_id"] for c in body["electives"]] == ["ENG203", "MTH201"]
        assert body["electives"][0]["unit"] == 2


class TestRegisterCourses:

    def test_register_includes_compulsory(self, auth_client):
        resp = auth_client.post("/student/register-courses", json={"electiveCourseIds": ["CSC102", "ENG203"]})

        assert resp.status_code == 201
        body = resp.get_json()
        assert body["courseIds"] == ["CSC101", "CSC102", "ENG203"]
        assert len(body["registrations"]) == 3
        assert body["alreadyRegistered"] == []

    def test_resubmission_is_idempotent(self, app, auth_client, student):
        auth_client.post("/student/register-courses", json={"electiveCourseIds": ["ENG203"]})

        resp = auth_client.post("/student/register-courses", json={"electiveCourseIds": ["ENG203"]})

        assert resp.status_code == 200
        assert resp.get_json()["registrations"] == []
        with app.app_context():
            assert db.session.query(CourseRegistration).filter_by(student_id=student["id"]).count() == 3

        listing = auth_client.get("/student/registrations").get_json()
        assert [r["course_id"] for r in listing["registrations"]] == ["CSC101", "CSC102", "ENG203"]

    def test_body_is_optional(self, auth_client):
        resp = auth_client.post("/student/register-courses", json={})

        assert resp.status_code == 201
        assert resp.get_json()["courseIds"] == ["CSC101", "CSC102"]

    def test_malformed_elective_list(self, auth_client):
        resp = auth_client.post("/student/register-courses", json={"electiveCourseIds": "ENG203"})

        assert resp.status_code == 400

    def test_unknown_course(self, auth_client):
        resp = auth_client.post("/student/register-courses", json={"electiveCourseIds": ["XYZ999"]})

        assert resp.status_code == 404

    def test_requires_login(self, client, catalog):
        assert client.post("/student/register-courses", json={}).status_code == 401


class TestCgpa:

    def test_cgpa_from_graded_rows(self, auth_client, student, add_grades):
        add_grades(student["id"], [
            ("CSC101", "1st", "A", 75.0),
            ("MTH201", "1st", "B", 62.0),
            ("ENG203", "2nd", "F", 30.0),
            ("CSC102", "2nd", None, None),
        ])

        body = auth_client.get("/student/cgpa").get_json()

        # A*3 + B*4 + F*2 = 31 over 9 units
        assert body["totalUnits"] == 9
        assert body["cgpa"] == 31 / 9

    def test_no_grades(self, auth_client):
        assert auth_client.get("/student/cgpa").get_json() == {"cgpa": 0, "totalUnits": 0}


class TestTranscript:

    def test_pdf_download(self, auth_client, student, add_grades):
        add_grades(student["id"], [("CSC101", "1st", "A", 75.0), ("ENG203", "2nd", "C", None)])

        resp = auth_client.get("/student/transcript")

        assert resp.status_code == 200
        assert resp.mimetype == "application/pdf"
        assert resp.headers["Content-Disposition"] == "attachment; filename=transcript.pdf"
        assert resp.data.startswith(b"%PDF")

    def test_term_outside_configured_order(self, auth_client, student, add_grades):
        add_grades(student["id"], [("CSC101", "summer", "A", 70.0), ("ENG203", "1st", "B", 64.0)])

        resp = auth_client.get("/student/transcript")

        assert resp.status_code == 200
        assert resp.data.startswith(b"%PDF")

    def test_empty_record_still_renders(self, auth_client):
        resp = auth_client.get("/student/transcript")

        assert resp.status_code == 200
        assert resp.data.startswith(b"%PDF")


class TestChangePassword:

    def test_change_then_login_with_new_password(self, auth_client, student):
        resp = auth_client.post("/student/account/password",
                                json={"old_password": student["password"], "new_password": "brandnew1"})
        assert resp.status_code == 200

        resp = auth_client.post("/auth/login", json={"email": student["email"], "password": "brandnew1"})
        assert resp.status_code == 200

    def test_wrong_old_password(self, auth_client):
        resp = auth_client.post("/student/account/password",
                                json={"old_password": "wrong", "new_password": "brandnew1"})
        assert resp.status_code == 400


class TestCurrentTerm:

    def test_term_comes_from_config(self, app, auth_client):
        app.config["CURRENT_TERM"] = "2nd"

        body = auth_client.get("/student/offerable-courses").get_json()

        assert body["term"] == "2nd"
        assert [c["course_id"] for c in body["compulsory"]] == ["CSC201"]
        assert body["electives"] == []
