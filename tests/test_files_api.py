"""Tests for file upload, listing, bookmarking, download and delete."""

import hashlib
import uuid

from sqlalchemy.exc import OperationalError

from codedpad.db.repositories.file_repository import FileRepository

from conftest import TEST_MAX_UPLOAD_SIZE, stored_blobs, upload


def delete(client, file_id, requester_id, secondary_code=None):
    body = {"requesterId": requester_id}
    if secondary_code is not None:
        body["secondaryCode"] = secondary_code
    return client.request("DELETE", f"/files/{file_id}", json=body)


def test_upload_then_download_round_trips(client):
    payload = bytes(range(256)) * 12

    response = upload(client, content=payload, filename="scan.pdf", content_type="application/pdf")
    assert response.status_code == 201, response.text
    file_id = response.json()["fileId"]

    download = client.get(f"/files/{file_id}/download")

    assert download.status_code == 200
    assert download.headers["content-type"].startswith("application/pdf")
    assert "scan.pdf" in download.headers["content-disposition"]
    assert len(download.content) == len(payload)
    assert hashlib.sha256(download.content).digest() == hashlib.sha256(payload).digest()


def test_list_files_for_owner(client):
    file_id = upload(client, content=b"abc").json()["fileId"]

    files = client.get("/files/alice").json()

    assert len(files) == 1
    assert files[0]["id"] == file_id
    assert files[0]["filename"] == "hello.txt"
    assert files[0]["contentType"] == "text/plain"
    assert files[0]["size"] == 3
    assert files[0]["isOwner"] is True
    assert files[0]["isLocked"] is False


def test_filename_client_path_is_stripped(client):
    upload(client, filename="C:\\Users\\alice\\notes.txt")

    assert client.get("/files/alice").json()[0]["filename"] == "notes.txt"


def test_oversize_upload_is_rejected_without_metadata(client, blob_dir):
    response = upload(client, content=b"x" * (TEST_MAX_UPLOAD_SIZE + 1))

    assert response.status_code == 413
    assert response.json()["reason"] == "payload_too_large"
    assert client.get("/files/alice").json() == []
    assert stored_blobs(blob_dir) == []


def test_disallowed_type_is_rejected(client, blob_dir):
    response = upload(client, content=b"MZ", filename="tool.exe", content_type="application/x-msdownload")

    assert response.status_code == 400
    assert response.json()["reason"] == "unsupported_media_type"
    assert client.get("/files/alice").json() == []
    assert stored_blobs(blob_dir) == []


def test_private_upload_without_code_is_invalid(client, blob_dir):
    response = upload(client, visibility="private")

    assert response.status_code == 400
    assert response.json()["reason"] == "invalid_input"
    assert stored_blobs(blob_dir) == []


def test_missing_file_part_is_invalid(client):
    response = client.post("/files", data={"ownerId": "alice"})

    assert response.status_code == 400
    assert response.json()["reason"] == "invalid_input"


def test_private_file_is_redacted_in_listing(client):
    upload(client, filename="diary.txt", visibility="private", secondary_code="xyz")

    locked = client.get("/files/alice").json()
    assert locked[0]["isLocked"] is True
    assert "filename" not in locked[0]
    assert "xyz" not in client.get("/files/alice").text

    unlocked = client.get("/files/alice", params={"secondaryCode": "xyz"}).json()
    assert unlocked[0]["isLocked"] is False
    assert unlocked[0]["filename"] == "diary.txt"


def test_private_download_requires_code(client):
    file_id = upload(client, content=b"top secret", visibility="private",
                     secondary_code="xyz").json()["fileId"]

    assert client.get(f"/files/{file_id}/download").status_code == 403
    wrong = client.get(f"/files/{file_id}/download", params={"secondaryCode": "nope"})
    assert wrong.status_code == 403
    assert wrong.json()["reason"] == "forbidden"

    ok = client.get(f"/files/{file_id}/download", params={"secondaryCode": "xyz"})
    assert ok.status_code == 200
    assert ok.content == b"top secret"


def test_download_unknown_file_is_not_found(client):
    response = client.get(f"/files/{uuid.uuid4()}/download")

    assert response.status_code == 404


def test_save_file_is_idempotent(client):
    file_id = upload(client).json()["fileId"]

    first = client.post(f"/files/{file_id}/save", json={"userId": "bob"})
    assert first.status_code == 200

    second = client.post(f"/files/{file_id}/save", json={"userId": "bob"})
    assert second.status_code == 400
    assert second.json()["reason"] == "already_saved"

    owner_view = client.get("/files/alice").json()
    assert owner_view[0]["savedCount"] == 1


def test_saved_files_appear_in_saver_listing(client):
    file_id = upload(client).json()["fileId"]
    client.post(f"/files/{file_id}/save", json={"userId": "bob"})

    files = client.get("/files/bob").json()

    assert len(files) == 1
    assert files[0]["id"] == file_id
    assert files[0]["ownerId"] == "alice"
    assert files[0]["isOwner"] is False
    assert files[0]["isSaved"] is True


def test_saved_private_file_stays_locked_for_saver(client):
    file_id = upload(client, visibility="private", secondary_code="xyz").json()["fileId"]
    client.post(f"/files/{file_id}/save", json={"userId": "bob"})

    files = client.get("/files/bob").json()

    assert files[0]["isLocked"] is True
    assert "filename" not in files[0]


def test_save_unknown_file_is_not_found(client):
    response = client.post(f"/files/{uuid.uuid4()}/save", json={"userId": "bob"})

    assert response.status_code == 404


def test_non_owner_delete_leaves_file_intact(client, blob_dir):
    file_id = upload(client, content=b"keep me").json()["fileId"]

    response = delete(client, file_id, "bob")

    assert response.status_code == 403
    assert len(stored_blobs(blob_dir)) == 1
    assert len(client.get("/files/alice").json()) == 1
    assert client.get(f"/files/{file_id}/download").content == b"keep me"


def test_owner_delete_removes_blob_and_metadata(client, blob_dir):
    file_id = upload(client).json()["fileId"]
    client.post(f"/files/{file_id}/save", json={"userId": "bob"})

    response = delete(client, file_id, "alice")

    assert response.status_code == 200
    assert stored_blobs(blob_dir) == []
    assert client.get("/files/alice").json() == []
    assert client.get("/files/bob").json() == []
    assert client.get(f"/files/{file_id}/download").status_code == 404


def test_private_delete_requires_matching_code(client, blob_dir):
    file_id = upload(client, visibility="private", secondary_code="xyz").json()["fileId"]

    assert delete(client, file_id, "alice").status_code == 403
    assert delete(client, file_id, "alice", "wrong").status_code == 403
    assert len(stored_blobs(blob_dir)) == 1

    assert delete(client, file_id, "alice", "xyz").status_code == 200
    assert stored_blobs(blob_dir) == []


def test_delete_unknown_file_is_not_found(client):
    assert delete(client, uuid.uuid4(), "alice").status_code == 404


def test_metadata_failure_removes_confirmed_blob(client, blob_dir, monkeypatch):
    async def failing_create(self, file):
        raise OperationalError("INSERT INTO files", {}, Exception("database is locked"))

    monkeypatch.setattr(FileRepository, "create", failing_create)

    response = upload(client)

    assert response.status_code == 500
    assert response.json()["reason"] == "storage_failure"
    assert stored_blobs(blob_dir) == []
    monkeypatch.undo()
    assert client.get("/files/alice").json() == []


def test_content_type_parameters_are_ignored(client):
    response = upload(client, content=b"plain", content_type="text/plain; charset=utf-8")

    assert response.status_code == 201, response.text
    file_id = response.json()["fileId"]
    assert client.get(f"/files/{file_id}/download").content == b"plain"
