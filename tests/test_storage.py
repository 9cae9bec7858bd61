import os

import pytest

from kostkelola_backend.config import settings
from kostkelola_backend.modules.storage.services import IMAGE_FOLDER


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path))
    return tmp_path


@pytest.fixture
async def owner_headers(owner, login):
    return await login(owner.email)


async def test_upload_and_delete_image(client, upload_dir, owner_headers):
    response = await client.post(
        "/api/storage/images",
        files={"file": ("kamar depan.jpg", b"\xff\xd8\xff\xe0fakejpeg", "image/jpeg")},
        data={"type": "common"},
        headers=owner_headers,
    )

    assert response.status_code == 201, response.text
    url = response.json()["data"]["url"]
    assert url.startswith(f"http://testserver/uploads/{IMAGE_FOLDER}/common-")
    assert url.endswith("-kamar_depan.jpg")
    filename = url.rsplit("/", 1)[-1]
    assert os.path.isfile(upload_dir / IMAGE_FOLDER / filename)

    deleted = await client.request(
        "DELETE", "/api/storage/images", json={"url": url}, headers=owner_headers
    )
    assert deleted.status_code == 200
    assert not os.path.exists(upload_dir / IMAGE_FOLDER / filename)


async def test_non_image_is_rejected(client, upload_dir, owner_headers):
    response = await client.post(
        "/api/storage/images",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=owner_headers,
    )

    assert response.status_code == 400


async def test_oversized_image_is_rejected(
    client, upload_dir, owner_headers, monkeypatch
):
    monkeypatch.setattr(settings, "max_upload_bytes", 4)

    response = await client.post(
        "/api/storage/images",
        files={"file": ("big.png", b"\x89PNG-too-big", "image/png")},
        headers=owner_headers,
    )

    assert response.status_code == 400


async def test_delete_missing_image(client, upload_dir, owner_headers):
    response = await client.request(
        "DELETE",
        "/api/storage/images",
        json={"url": "http://testserver/uploads/property-images/../../etc/passwd"},
        headers=owner_headers,
    )

    assert response.status_code == 404


async def test_upload_requires_login(client, upload_dir):
    response = await client.post(
        "/api/storage/images",
        files={"file": ("a.jpg", b"\xff\xd8", "image/jpeg")},
    )

    assert response.status_code in (401, 403)
