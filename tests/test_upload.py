"""Upload endpoint tests."""

from app.core.config import settings
from app.services.upload_service import generate_filename

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def test_upload_requires_auth(client):
    response = client.post("/api/upload", files={"file": ("photo.png", PNG_BYTES, "image/png")})
    assert response.status_code == 401


def test_upload_png_and_fetch(client, user_headers, upload_dir):
    response = client.post(
        "/api/upload",
        headers=user_headers,
        files={"file": ("pot hole!.png", PNG_BYTES, "image/png")},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    name = data["fileName"]
    assert name.endswith("-pot_hole_.png")
    assert data["url"] == f"http://testserver/uploads/{name}"
    assert (upload_dir / name).read_bytes() == PNG_BYTES

    served = client.get(f"/uploads/{name}")
    assert served.status_code == 200
    assert served.content == PNG_BYTES


def test_upload_uses_backend_url(client, user_headers, monkeypatch):
    monkeypatch.setattr(settings, "backend_url", "https://api.example.org/")
    response = client.post(
        "/api/upload",
        headers=user_headers,
        files={"file": ("photo.jpg", b"\xff\xd8\xff" + b"\x00" * 16, "image/jpeg")},
    )
    assert response.status_code == 200
    assert response.json()["data"]["url"].startswith("https://api.example.org/uploads/")


def test_upload_rejects_other_types(client, user_headers):
    gif = client.post(
        "/api/upload",
        headers=user_headers,
        files={"file": ("anim.gif", b"GIF89a", "image/gif")},
    )
    assert gif.status_code == 400
    assert gif.json()["success"] is False

    disguised = client.post(
        "/api/upload",
        headers=user_headers,
        files={"file": ("script.exe", PNG_BYTES, "image/png")},
    )
    assert disguised.status_code == 400


def test_upload_requires_file(client, user_headers):
    response = client.post("/api/upload", headers=user_headers, data={"note": "nothing attached"})
    assert response.status_code == 400
    assert response.json()["message"] == "Please upload a file"


def test_upload_size_limit(client, user_headers, monkeypatch):
    monkeypatch.setattr(settings, "max_upload_bytes", 16)
    response = client.post(
        "/api/upload",
        headers=user_headers,
        files={"file": ("big.png", PNG_BYTES, "image/png")},
    )
    assert response.status_code == 400


def test_generated_names_do_not_collide():
    names = {generate_filename("same.jpg") for _ in range(50)}
    assert len(names) == 50
    assert all(n.endswith("-same.jpg") for n in names)
    assert len(generate_filename("x" * 200 + ".png").split("-", 2)[2]) == 50
