"""Tests for notes API endpoints."""

import uuid


def create_note(client, owner_id="alice", content="secret text", title="Groceries",
                visibility="public", secondary_code=None):
    payload = {
        "ownerId": owner_id,
        "title": title,
        "content": content,
        "visibility": visibility,
    }
    if secondary_code is not None:
        payload["secondaryCode"] = secondary_code
    response = client.post("/notes", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["noteId"]


def test_create_and_list_public_note(client):
    note_id = create_note(client)

    response = client.get("/notes/alice")

    assert response.status_code == 200
    notes = response.json()
    assert len(notes) == 1
    assert notes[0]["id"] == note_id
    assert notes[0]["ownerId"] == "alice"
    assert notes[0]["title"] == "Groceries"
    assert notes[0]["content"] == "secret text"
    assert notes[0]["isLocked"] is False


def test_private_note_scenario(client):
    """alice + xyz: locked without code, open with it, locked with a wrong one."""
    create_note(client, visibility="private", secondary_code="xyz")

    locked = client.get("/notes/alice").json()
    assert locked[0]["isLocked"] is True
    assert "content" not in locked[0]
    assert "id" in locked[0]

    unlocked = client.get("/notes/alice", params={"secondaryCode": "xyz"}).json()
    assert unlocked[0]["isLocked"] is False
    assert unlocked[0]["content"] == "secret text"

    wrong = client.get("/notes/alice", params={"secondaryCode": "wrong"}).json()
    assert wrong[0]["isLocked"] is True
    assert "content" not in wrong[0]


def test_secondary_code_never_serialized(client):
    note_id = create_note(client, visibility="private", secondary_code="pad-lock-42")

    for response in (
        client.get("/notes/alice"),
        client.get("/notes/alice", params={"secondaryCode": "pad-lock-42"}),
        client.get(f"/notes/item/{note_id}", params={"secondaryCode": "pad-lock-42"}),
    ):
        assert response.status_code == 200
        assert "pad-lock-42" not in response.text
        assert "secondaryCode" not in response.text


def test_list_only_returns_owned_notes(client):
    create_note(client, owner_id="alice")
    create_note(client, owner_id="bob", content="bob's note")

    notes = client.get("/notes/bob").json()

    assert [n["content"] for n in notes] == ["bob's note"]
    assert client.get("/notes/nobody").json() == []


def test_title_defaults_when_missing(client):
    response = client.post("/notes", json={"ownerId": "alice", "content": "untitled body"})
    assert response.status_code == 201

    notes = client.get("/notes/alice").json()
    assert notes[0]["title"] == "Untitled"


def test_empty_content_is_invalid(client):
    response = client.post("/notes", json={"ownerId": "alice", "content": "   "})

    assert response.status_code == 400
    assert response.json()["reason"] == "invalid_input"


def test_private_note_requires_code(client):
    response = client.post("/notes", json={
        "ownerId": "alice",
        "content": "body",
        "visibility": "private",
    })

    assert response.status_code == 400
    assert response.json()["reason"] == "invalid_input"
    assert client.get("/notes/alice").json() == []


def test_malformed_body_is_structured_error(client):
    response = client.post("/notes", json={"title": "no owner"})

    assert response.status_code == 400
    body = response.json()
    assert body["reason"] == "invalid_input"
    assert body["message"]


def test_single_note_fetch_is_gated(client):
    note_id = create_note(client, visibility="private", secondary_code="xyz")

    locked = client.get(f"/notes/item/{note_id}")
    assert locked.status_code == 200
    assert locked.json()["isLocked"] is True
    assert "content" not in locked.json()

    unlocked = client.get(f"/notes/item/{note_id}", params={"secondaryCode": "xyz"})
    assert unlocked.json()["content"] == "secret text"


def test_get_unknown_note_is_not_found(client):
    response = client.get(f"/notes/item/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["reason"] == "not_found"


def test_owner_can_resave_note(client):
    note_id = create_note(client)

    response = client.put(f"/notes/item/{note_id}", json={
        "requesterId": "alice",
        "title": "Renamed",
        "content": "replaced",
    })

    assert response.status_code == 200
    assert response.json()["title"] == "Renamed"
    assert response.json()["content"] == "replaced"
    assert client.get("/notes/alice").json()[0]["content"] == "replaced"


def test_non_owner_cannot_resave_note(client):
    note_id = create_note(client)

    response = client.put(f"/notes/item/{note_id}", json={
        "requesterId": "mallory",
        "content": "defaced",
    })

    assert response.status_code == 403
    assert client.get("/notes/alice").json()[0]["content"] == "secret text"


def test_delete_note_requires_owner(client):
    note_id = create_note(client)

    forbidden = client.request("DELETE", f"/notes/{note_id}", json={"requesterId": "bob"})
    assert forbidden.status_code == 403
    assert forbidden.json()["reason"] == "forbidden"
    assert len(client.get("/notes/alice").json()) == 1

    deleted = client.request("DELETE", f"/notes/{note_id}", json={"requesterId": "alice"})
    assert deleted.status_code == 200
    assert client.get("/notes/alice").json() == []
    assert client.get(f"/notes/item/{note_id}").status_code == 404


def test_delete_unknown_note_is_not_found(client):
    response = client.request("DELETE", f"/notes/{uuid.uuid4()}", json={"requesterId": "alice"})

    assert response.status_code == 404


def test_list_returns_every_owned_note(client):
    for i in range(105):
        client.post("/notes", json={"ownerId": "alice", "content": f"note {i}"})

    notes = client.get("/notes/alice").json()

    assert len(notes) == 105
    assert {n["content"] for n in notes} == {f"note {i}" for i in range(105)}


def test_owner_id_is_used_exactly_as_given(client):
    create_note(client, owner_id="alice ")

    assert len(client.get("/notes/alice ").json()) == 1
    assert client.get("/notes/alice").json() == []
