from datetime import datetime, timedelta, timezone


def _setup(make_client, create_meetup):
    host = make_client(full_name="מארחת")
    participant = make_client(full_name="משתתף")
    outsider = make_client()
    meetup = create_meetup(host)
    participant.post(f"/api/meetups/{meetup['id']}/join")
    return host, participant, outsider, meetup


def test_host_and_participant_can_chat(make_client, create_meetup):
    host, participant, _, meetup = _setup(make_client, create_meetup)
    url = f"/api/meetups/{meetup['id']}/messages"

    resp = host.post(url, json={"text": "  שלום לכולם  "})
    assert resp.status_code == 201
    assert resp.json()["text"] == "שלום לכולם"
    assert resp.json()["user_name"] == "מארחת"
    assert participant.post(url, json={"text": "היי"}).status_code == 201

    messages = participant.get(url).json()
    assert [m["text"] for m in messages] == ["שלום לכולם", "היי"]
    assert [m["user_id"] for m in messages] == [host.user_id, participant.user_id]


def test_outsider_cannot_read_or_write(make_client, create_meetup):
    _, _, outsider, meetup = _setup(make_client, create_meetup)
    url = f"/api/meetups/{meetup['id']}/messages"

    assert outsider.get(url).status_code == 403
    resp = outsider.post(url, json={"text": "אפשר להצטרף?"})
    assert resp.status_code == 403
    assert resp.json()["detail"] == "Access denied"


def test_former_participant_loses_access(make_client, create_meetup):
    _, participant, _, meetup = _setup(make_client, create_meetup)
    participant.delete(f"/api/meetups/{meetup['id']}/leave")

    assert participant.get(f"/api/meetups/{meetup['id']}/messages").status_code == 403


def test_unknown_meetup_is_404(make_client):
    client = make_client()
    assert client.get("/api/meetups/nope/messages").status_code == 404


def test_blank_message_rejected(make_client, create_meetup):
    host, _, _, meetup = _setup(make_client, create_meetup)

    resp = host.post(f"/api/meetups/{meetup['id']}/messages", json={"text": "   "})

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "text"


def test_after_cursor_returns_only_newer_messages(make_client, create_meetup):
    host, participant, _, meetup = _setup(make_client, create_meetup)
    url = f"/api/meetups/{meetup['id']}/messages"
    first = host.post(url, json={"text": "ראשון"}).json()
    participant.post(url, json={"text": "שני"})

    newer = host.get(url, params={"after": first["created_at"]}).json()
    future = (datetime.now(timezone.utc) + timedelta(hours=1)).isoformat()

    assert [m["text"] for m in newer] == ["שני"]
    assert host.get(url, params={"after": future}).json() == []
