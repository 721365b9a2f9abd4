from thinklink.models.feedback import AppFeedback


def test_feedback_stored(make_client, db):
    client = make_client()

    resp = client.post("/api/feedback", json={"message": "אפליקציה מעולה", "rating": 5, "category": "general"})

    assert resp.status_code == 201
    assert resp.json()["user_id"] == client.user_id
    row = db.query(AppFeedback).one()
    assert (row.message, row.rating, row.category) == ("אפליקציה מעולה", 5, "general")


def test_feedback_validation(make_client):
    client = make_client()

    assert client.post("/api/feedback", json={"message": "x", "rating": 6}).status_code == 400
    assert client.post("/api/feedback", json={"message": "x", "category": "other"}).status_code == 400
    assert client.post("/api/feedback", json={"message": ""}).status_code == 400


def test_feedback_requires_login():
    from fastapi.testclient import TestClient
    from thinklink.main import app

    assert TestClient(app).post("/api/feedback", json={"message": "hi"}).status_code == 401
