from thinklink.database import SessionLocal
from thinklink.models.participation import Participation


def _participation_rows(meetup_id, user_id=None):
    session = SessionLocal()
    try:
        q = session.query(Participation).filter(Participation.meetup_id == meetup_id)
        if user_id is not None:
            q = q.filter(Participation.user_id == user_id)
        return q.count()
    finally:
        session.close()


def test_join_returns_joined_count(make_client, create_meetup):
    host, guest = make_client(), make_client()
    meetup = create_meetup(host)

    resp = guest.post(f"/api/meetups/{meetup['id']}/join")

    assert resp.status_code == 201
    assert resp.json() == {"message": "joined", "joined_count": 1}
    assert host.get(f"/api/meetups/{meetup['id']}").json()["joined_count"] == 1


def test_second_join_rejected_without_duplicate_row(make_client, create_meetup):
    host, guest = make_client(), make_client()
    meetup = create_meetup(host)
    guest.post(f"/api/meetups/{meetup['id']}/join")

    resp = guest.post(f"/api/meetups/{meetup['id']}/join")

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Already joined this meetup"
    assert _participation_rows(meetup["id"], guest.user_id) == 1


def test_capacity_respected_for_sequential_joins(make_client, create_meetup):
    host = make_client()
    meetup = create_meetup(host, capacity=2)
    first, second, third = make_client(), make_client(), make_client()

    assert first.post(f"/api/meetups/{meetup['id']}/join").status_code == 201
    resp = second.post(f"/api/meetups/{meetup['id']}/join")
    assert resp.status_code == 201
    assert resp.json()["joined_count"] == 2

    resp = third.post(f"/api/meetups/{meetup['id']}/join")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Meetup is full"
    assert _participation_rows(meetup["id"]) == 2


def test_already_joined_reported_before_full(make_client, create_meetup):
    host = make_client()
    meetup = create_meetup(host, capacity=2)
    first, second = make_client(), make_client()
    first.post(f"/api/meetups/{meetup['id']}/join")
    second.post(f"/api/meetups/{meetup['id']}/join")

    resp = first.post(f"/api/meetups/{meetup['id']}/join")

    assert resp.json()["detail"] == "Already joined this meetup"


def test_leave_removes_exactly_one_row_and_frees_a_seat(make_client, create_meetup):
    host = make_client()
    meetup = create_meetup(host, capacity=2)
    a, b, c = make_client(), make_client(), make_client()
    a.post(f"/api/meetups/{meetup['id']}/join")
    b.post(f"/api/meetups/{meetup['id']}/join")

    resp = a.delete(f"/api/meetups/{meetup['id']}/leave")

    assert resp.status_code == 200
    assert resp.json() == {"message": "left", "joined_count": 1}
    assert _participation_rows(meetup["id"], a.user_id) == 0
    assert _participation_rows(meetup["id"], b.user_id) == 1
    assert c.post(f"/api/meetups/{meetup['id']}/join").status_code == 201


def test_leave_without_participation_is_a_client_error(make_client, create_meetup):
    host, stranger = make_client(), make_client()
    meetup = create_meetup(host)

    resp = stranger.delete(f"/api/meetups/{meetup['id']}/leave")

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Not joined this meetup"


def test_join_and_leave_unknown_meetup(make_client):
    client = make_client()
    assert client.post("/api/meetups/missing/join").status_code == 404
    assert client.delete("/api/meetups/missing/leave").status_code == 404


def test_join_requires_session(make_client, create_meetup):
    host = make_client()
    meetup = create_meetup(host)
    host.post("/api/logout")

    assert host.post(f"/api/meetups/{meetup['id']}/join").status_code == 401


def test_participants_and_count(make_client, create_meetup):
    host = make_client()
    meetup = create_meetup(host)
    guest = make_client(full_name="יואב")
    guest.post(f"/api/meetups/{meetup['id']}/join")

    participants = host.get(f"/api/meetups/{meetup['id']}/participants").json()
    count = host.get(f"/api/meetups/{meetup['id']}/participation-count").json()

    assert [(p["user_id"], p["full_name"], p["status"]) for p in participants] == [
        (guest.user_id, "יואב", "joined")
    ]
    assert count == {"count": 1}


def test_joined_and_hosted_lists(make_client, create_meetup):
    host, guest = make_client(), make_client()
    meetup = create_meetup(host)
    guest.post(f"/api/meetups/{meetup['id']}/join")

    joined = guest.get("/api/user/joined-meetups").json()
    hosted = host.get("/api/user/hosted-meetups").json()
    upcoming = host.get("/api/user/hosted-meetups", params={"upcoming": "true"}).json()

    assert [m["id"] for m in joined] == [meetup["id"]]
    assert joined[0]["joined_count"] == 1
    assert [m["id"] for m in hosted] == [meetup["id"]]
    assert [m["id"] for m in upcoming] == [meetup["id"]]
    assert guest.get("/api/user/hosted-meetups").json() == []
