from bson import ObjectId


def test_send_then_read_history(client, signup):
    a_id, _, a_headers = signup("Alice")
    b_id, _, b_headers = signup("Bob")

    resp = client.post(f"/messages/{b_id}", json={"messageBody": "hi"}, headers=a_headers)
    assert resp.status_code == 200, resp.text
    sent = resp.json()
    assert sent["text"] == "hi"
    assert sent["sender_id"] == a_id

    resp = client.get(f"/messages/{a_id}", headers=b_headers)
    assert resp.status_code == 200
    messages = resp.json()["messages"]
    assert [m["id"] for m in messages] == [sent["id"]]


def test_history_without_conversation_is_404(client, signup):
    _, _, a_headers = signup("Alice")
    b_id, _, _ = signup("Bob")

    resp = client.get(f"/messages/{b_id}", headers=a_headers)

    assert resp.status_code == 404
    assert resp.json() == {"message": "You have no conversation with this person"}


def test_empty_message_is_422(client, signup):
    _, _, a_headers = signup("Alice")
    b_id, _, _ = signup("Bob")

    resp = client.post(f"/messages/{b_id}", json={"messageBody": "  "}, headers=a_headers)

    assert resp.status_code == 422
    assert resp.json() == {"message": "Message text cannot be empty"}


def test_missing_body_field_is_422_with_message(client, signup):
    _, _, a_headers = signup("Alice")
    b_id, _, _ = signup("Bob")

    resp = client.post(f"/messages/{b_id}", json={}, headers=a_headers)

    assert resp.status_code == 422
    assert "messageBody" in resp.json()["message"]


def test_malformed_receiver_is_422(client, signup):
    _, _, a_headers = signup("Alice")

    resp = client.post("/messages/not-an-id", json={"messageBody": "hi"}, headers=a_headers)

    assert resp.status_code == 422


def test_unknown_receiver_is_404(client, signup):
    _, _, a_headers = signup("Alice")

    resp = client.post(f"/messages/{ObjectId()}", json={"messageBody": "hi"}, headers=a_headers)

    assert resp.status_code == 404
    assert resp.json() == {"message": "Receiver not found"}


def test_messages_require_token(client, signup):
    b_id, _, _ = signup("Bob")

    resp = client.post(f"/messages/{b_id}", json={"messageBody": "hi"})
    assert resp.status_code == 401
    assert resp.json() == {"message": "No token, authorization denied"}

    resp = client.get(f"/messages/{b_id}", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401
    assert resp.json() == {"message": "Token is not valid"}


def test_conversation_listing_for_receiver(client, signup):
    a_id, _, a_headers = signup("Alice")
    b_id, _, b_headers = signup("Bob")

    client.post(f"/messages/{b_id}", json={"messageBody": "hi"}, headers=a_headers)

    resp = client.get("/conversations", headers=b_headers)
    assert resp.status_code == 200
    body = resp.json()
    assert body["next_cursor"] is None
    assert len(body["items"]) == 1
    summary = body["items"][0]
    assert summary["last_message"] == {"text": "hi", "sender_id": a_id}
    assert summary["participant"]["id"] == a_id
    assert summary["participant"]["full_name"] == "Alice"


def test_conversation_listing_bad_cursor_is_422(client, signup):
    _, _, a_headers = signup("Alice")

    resp = client.get("/conversations", params={"limit": 5, "cursor": "nope"}, headers=a_headers)

    assert resp.status_code == 422


def test_conversation_listing_huge_cursor_timestamp_is_422(client, signup):
    _, _, a_headers = signup("Alice")

    cursor = "99999999999999999999:" + "a" * 24
    resp = client.get("/conversations", params={"limit": 2, "cursor": cursor}, headers=a_headers)

    assert resp.status_code == 422
    assert resp.json()["message"].startswith("Invalid cursor")


def test_unknown_route_uses_message_shape(client):
    resp = client.get("/does-not-exist")

    assert resp.status_code == 404
    assert resp.json() == {"message": "Not Found"}
