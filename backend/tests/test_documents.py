from app.core.config import settings
from app.db.session import get_document_repository


def _upload(client, headers, *files):
    return client.post("/documents", files=[("files", f) for f in files], headers=headers)


def test_upload_text_document(client, auth_headers):
    r = _upload(client, auth_headers, ("cours.txt", b"Le modele OSI a 7 couches.", "text/plain"))
    assert r.status_code == 200, r.text
    doc = r.json()["documents"][0]
    assert doc["name"] == "cours.txt"
    assert doc["size"] == 26
    assert doc["content"] == "Le modele OSI a 7 couches."
    assert doc["filename"].endswith(".txt")
    assert (settings.uploads_dir / doc["filename"]).read_bytes() == b"Le modele OSI a 7 couches."

    listed = client.get("/documents").json()
    assert [d["id"] for d in listed] == [doc["id"]]


def test_upload_pdf_requires_magic_bytes(client, auth_headers):
    r = _upload(client, auth_headers, ("cours.pdf", b"not a pdf", "application/pdf"))
    assert r.status_code == 400

    r = _upload(client, auth_headers, ("cours.pdf", b"%PDF-1.4 ...", "application/pdf"))
    assert r.status_code == 200
    assert r.json()["documents"][0]["content"] == ""


def test_upload_rejects_bad_type_and_keeps_batch_atomic(client, auth_headers):
    r = _upload(
        client,
        auth_headers,
        ("ok.txt", b"hello", "text/plain"),
        ("evil.exe", b"MZ", "application/octet-stream"),
    )
    assert r.status_code == 400
    assert get_document_repository().load_all() == []


def test_upload_rejects_mismatched_mime(client, auth_headers):
    r = _upload(client, auth_headers, ("cours.txt", b"hello", "image/png"))
    assert r.status_code == 400


def test_upload_rejects_oversized_file(client, auth_headers, monkeypatch):
    monkeypatch.setattr(settings, "upload_max_bytes", 4)
    r = _upload(client, auth_headers, ("cours.txt", b"hello", "text/plain"))
    assert r.status_code == 400
    assert r.json()["error_message"] == "file size exceeds limit"


def test_upload_requires_login(client):
    r = client.post("/documents", files=[("files", ("a.txt", b"x", "text/plain"))])
    assert r.status_code == 401


def test_delete_document_removes_file(client, auth_headers):
    doc = _upload(client, auth_headers, ("cours.txt", b"hello", "text/plain")).json()["documents"][0]
    path = settings.uploads_dir / doc["filename"]
    assert path.exists()

    r = client.delete("/documents", params={"id": doc["id"]}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["success"] is True
    assert not path.exists()
    assert client.get("/documents").json() == []

    r = client.delete("/documents", params={"id": doc["id"]}, headers=auth_headers)
    assert r.status_code == 404
