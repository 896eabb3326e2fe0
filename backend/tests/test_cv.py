from internhub.api.routes import cv as cv_routes

from conftest import auth_headers, make_student, make_user


def _student_headers(db_session):
    user = make_user(db_session, name="Neha Gupta")
    student = make_student(db_session, user)
    return student, auth_headers(user)


def test_generate_requires_ai(client, db_session, monkeypatch):
    monkeypatch.setattr(cv_routes, "ai_is_configured", lambda: False)
    _, headers = _student_headers(db_session)

    response = client.post("/api/cv/generate", headers=headers)

    assert response.status_code == 503


def test_generate_history_and_download(client, db_session, monkeypatch):
    captured = {}

    def fake_generate(data):
        captured.update(data)
        return "<html><body><h1>Neha Gupta</h1></body></html>"

    monkeypatch.setattr(cv_routes, "ai_is_configured", lambda: True)
    monkeypatch.setattr(cv_routes, "generate_cv_html", fake_generate)
    student, headers = _student_headers(db_session)

    generated = client.post("/api/cv/generate", headers=headers)
    assert generated.status_code == 201
    cv = generated.json()["cv"]
    assert cv["format"] == "html"
    assert cv["file_url"].startswith("/uploads/cvs/")
    assert captured["name"] == "Neha Gupta"
    assert captured["roll_number"] == student.roll_number

    history = client.get("/api/cv/history", headers=headers).json()
    assert [row["id"] for row in history] == [cv["id"]]

    download = client.get(f"/api/cv/download/{cv['id']}", headers=headers)
    assert download.status_code == 200
    assert "<h1>Neha Gupta</h1>" in download.text


def test_llm_failure_is_service_unavailable(client, db_session, monkeypatch):
    def failing(_):
        raise RuntimeError("upstream timeout")

    monkeypatch.setattr(cv_routes, "ai_is_configured", lambda: True)
    monkeypatch.setattr(cv_routes, "generate_cv_html", failing)
    _, headers = _student_headers(db_session)

    response = client.post("/api/cv/generate", headers=headers)

    assert response.status_code == 503


def test_cannot_download_another_students_cv(client, db_session, monkeypatch):
    monkeypatch.setattr(cv_routes, "ai_is_configured", lambda: True)
    monkeypatch.setattr(cv_routes, "generate_cv_html", lambda data: "<html></html>")
    _, owner_headers = _student_headers(db_session)
    _, other_headers = _student_headers(db_session)
    cv_id = client.post("/api/cv/generate", headers=owner_headers).json()["cv"]["id"]

    response = client.get(f"/api/cv/download/{cv_id}", headers=other_headers)

    assert response.status_code == 404
