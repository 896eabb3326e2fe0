from conftest import auth_headers, make_internship, make_student, make_user


def test_student_profile_lifecycle(client, db_session):
    user = make_user(db_session, name="Karan Mehta")
    headers = auth_headers(user)

    created = client.post(
        "/api/students",
        json={"roll_number": "CS2021001", "department": "Computer Science", "semester": 6, "cgpa": 8.7},
        headers=headers,
    )
    assert created.status_code == 201
    student_id = created.json()["id"]
    assert created.json()["approved"] is False

    again = client.post("/api/students", json={"roll_number": "CS2021999"}, headers=headers)
    assert again.status_code == 409

    me = client.get("/api/students/me", headers=headers)
    assert me.json()["user"]["name"] == "Karan Mehta"

    updated = client.put(f"/api/students/{student_id}", json={"semester": 7, "roll_number": None}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["semester"] == 7
    assert updated.json()["roll_number"] == "CS2021001"

    detail = client.post(
        f"/api/students/{student_id}/profile",
        json={"bio": "Loves distributed systems", "skills": ["Python", "Go"]},
        headers=headers,
    )
    assert detail.status_code == 200
    assert detail.json()["skills"] == ["Python", "Go"]


def test_roll_number_is_unique(client, db_session):
    make_student(db_session, make_user(db_session), roll_number="EE2020007")
    newcomer = make_user(db_session)

    response = client.post("/api/students", json={"roll_number": "EE2020007"}, headers=auth_headers(newcomer))

    assert response.status_code == 409


def test_students_cannot_see_or_edit_each_other(client, db_session):
    owner = make_student(db_session, make_user(db_session))
    stranger = make_user(db_session)

    assert client.get(f"/api/students/{owner.id}", headers=auth_headers(stranger)).status_code == 403
    assert (
        client.put(f"/api/students/{owner.id}", json={"phone": "123"}, headers=auth_headers(stranger)).status_code
        == 403
    )
    assert client.get("/api/students", headers=auth_headers(stranger)).status_code == 403


def test_staff_approval_and_filters(client, db_session):
    faculty = make_user(db_session, role="faculty")
    pending = make_student(db_session, make_user(db_session), approved=False, department="Mechanical")
    make_student(db_session, make_user(db_session), department="Computer Science")

    approved = client.post(f"/api/students/{pending.id}/approve", headers=auth_headers(faculty))
    assert approved.status_code == 200
    assert approved.json()["approved"] is True

    mechanical = client.get("/api/students", params={"department": "Mechanical"}, headers=auth_headers(faculty))
    assert [row["id"] for row in mechanical.json()] == [str(pending.id)]

    revoked = client.post(
        f"/api/students/{pending.id}/approve",
        json={"approved": False},
        headers=auth_headers(faculty),
    )
    assert revoked.json()["approved"] is False


def test_internship_crud_is_staff_only(client, db_session):
    faculty = make_user(db_session, role="faculty")
    student = make_user(db_session)
    body = {
        "title": "Data Analyst Intern",
        "company_name": "Northwind",
        "location": "Bengaluru",
        "type": "hybrid",
        "required_skills": ["SQL", " ", "Python "],
    }

    assert client.post("/api/internships", json=body, headers=auth_headers(student)).status_code == 403

    created = client.post("/api/internships", json=body, headers=auth_headers(faculty))
    assert created.status_code == 201
    payload = created.json()
    assert payload["posted_by"] == str(faculty.id)
    assert payload["required_skills"] == ["SQL", "Python"]
    internship_id = payload["id"]

    updated = client.put(
        f"/api/internships/{internship_id}",
        json={"stipend": 15000, "title": None},
        headers=auth_headers(faculty),
    )
    assert updated.json()["stipend"] == 15000
    assert updated.json()["title"] == "Data Analyst Intern"

    deleted = client.delete(f"/api/internships/{internship_id}", headers=auth_headers(faculty))
    assert deleted.json()["is_active"] is False
    assert client.get(f"/api/internships/{internship_id}").status_code == 200
    assert client.get("/api/internships", params={"is_active": True}).json() == []
    assert [row["id"] for row in client.get("/api/internships").json()] == [internship_id]


def test_internship_listing_filters_and_counts(client, db_session):
    poster = make_user(db_session, role="faculty")
    pune = make_internship(db_session, posted_by=poster.id, location="Pune", type="onsite")
    make_internship(db_session, posted_by=poster.id, location="Remote", type="remote", title="Remote Dev")
    make_internship(db_session, posted_by=poster.id, location="Pune", is_active=False, title="Closed")
    applicant = make_user(db_session)
    student = make_student(db_session, applicant)
    client.post(
        "/api/applications",
        json={"student_id": str(student.id), "internship_id": str(pune.id)},
        headers=auth_headers(applicant),
    )

    in_pune = client.get("/api/internships", params={"location": "pun", "is_active": True}).json()
    assert [row["id"] for row in in_pune] == [str(pune.id)]
    assert in_pune[0]["applications_count"] == 1

    remote = client.get("/api/internships", params={"type": "remote"}).json()
    assert [row["title"] for row in remote] == ["Remote Dev"]

    closed = client.get("/api/internships", params={"is_active": False}).json()
    assert [row["title"] for row in closed] == ["Closed"]

    everything = client.get("/api/internships").json()
    assert sorted(row["title"] for row in everything) == ["Backend Intern", "Closed", "Remote Dev"]
    assert {row["is_active"] for row in everything} == {True, False}
