"""Tests for the /donate endpoints and slip upload handling."""

import re

import pytest

from config import settings

SLIP_PATH = re.compile(r"^uploads/slip-\d+-\d+\.(png|jpg|jpeg)$")


def _upload(client, headers, data=None, files=None):
    return client.post("/donate", data=data or {}, files=files, headers=headers)


class TestCreateDonator:

    def test_create_with_png_slip(self, client, auth_headers, png_bytes, uploads_dir):
        response = _upload(
            client,
            auth_headers,
            data={"name": "Somchai", "message": "Keep it up", "amount": "100"},
            files={"slip": ("receipt.png", png_bytes, "image/png")},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Donator added successfully"
        donator = body["donator"]
        assert donator["name"] == "Somchai"
        assert donator["message"] == "Keep it up"
        assert donator["allowed"] is False
        assert SLIP_PATH.match(donator["file_path"])
        saved = uploads_dir / donator["file_path"].split("/")[-1]
        assert saved.read_bytes() == png_bytes

    def test_defaults_to_anonymous(self, client, auth_headers, jpeg_bytes):
        response = _upload(
            client, auth_headers, files={"slip": ("slip.JPG", jpeg_bytes, "image/jpeg")}
        )

        assert response.status_code == 201
        assert response.json()["donator"]["name"] == "Anonymous"
        assert response.json()["donator"]["message"] == ""
        assert response.json()["donator"]["file_path"].endswith(".jpg")

    @pytest.mark.parametrize("data", [{}, {"name": "A", "message": "B", "amount": "5"}])
    def test_missing_slip_is_400(self, client, auth_headers, donator_repo, data):
        response = _upload(client, auth_headers, data=data)

        assert response.status_code == 400
        assert response.json()["error"] == "Slip image is required"
        assert donator_repo.donators == {}

    def test_disallowed_extension_is_400(self, client, auth_headers, png_bytes):
        response = _upload(
            client, auth_headers, files={"slip": ("slip.gif", png_bytes, "image/gif")}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Only images (jpg, jpeg, png) are allowed"

    def test_mismatched_mime_type_is_400(self, client, auth_headers, png_bytes):
        response = _upload(
            client, auth_headers, files={"slip": ("slip.png", png_bytes, "text/plain")}
        )

        assert response.status_code == 400

    def test_content_not_matching_extension_is_400(self, client, auth_headers, uploads_dir):
        response = _upload(
            client, auth_headers, files={"slip": ("slip.png", b"<?php echo 1; ?>", "image/png")}
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid PNG file"
        assert list(uploads_dir.iterdir()) == []

    def test_oversized_slip_is_400(self, client, auth_headers, monkeypatch, png_bytes):
        monkeypatch.setattr(settings, "MAX_SLIP_SIZE", 16)

        response = _upload(
            client, auth_headers, files={"slip": ("slip.png", png_bytes, "image/png")}
        )

        assert response.status_code == 400
        assert response.json()["error"].startswith("File too large")

    def test_store_failure_removes_saved_slip(self, client, auth_headers, donator_repo, png_bytes, uploads_dir):
        donator_repo.fail_create = True

        response = _upload(
            client, auth_headers, files={"slip": ("slip.png", png_bytes, "image/png")}
        )

        assert response.status_code == 500
        assert response.json()["error"] == "Database operation failed: create donator"
        assert list(uploads_dir.iterdir()) == []

    def test_create_requires_key(self, client, png_bytes, donator_repo):
        response = _upload(
            client, {}, files={"slip": ("slip.png", png_bytes, "image/png")}
        )

        assert response.status_code == 401
        assert donator_repo.donators == {}


class TestModeration:

    @pytest.fixture
    def donator_id(self, client, auth_headers, png_bytes):
        response = _upload(
            client, auth_headers, data={"name": "Nok"},
            files={"slip": ("slip.png", png_bytes, "image/png")},
        )
        return response.json()["donator"]["id"]

    def test_allow_then_listed_as_allowed(self, client, auth_headers, donator_id):
        response = client.put(f"/donate/{donator_id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Donator updated successfully"
        assert response.json()["donator"]["allowed"] is True

        allowed = client.get("/donate/allowed", headers=auth_headers).json()["donators"]
        unallowed = client.get("/donate/unallowed", headers=auth_headers).json()["donators"]
        assert [d["id"] for d in allowed] == [donator_id]
        assert unallowed == []

    def test_disallow(self, client, auth_headers, donator_id):
        client.put(f"/donate/{donator_id}", headers=auth_headers)

        response = client.put(f"/donate/{donator_id}/disallow", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["donator"]["allowed"] is False
        unallowed = client.get("/donate/unallowed", headers=auth_headers).json()["donators"]
        assert [d["id"] for d in unallowed] == [donator_id]

    def test_list_all(self, client, auth_headers, donator_id):
        response = client.get("/donate", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Donators retrieved successfully"
        assert [d["id"] for d in body["donators"]] == [donator_id]

    def test_delete(self, client, auth_headers, donator_id):
        response = client.delete(f"/donate/{donator_id}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Donator deleted successfully"}
        assert client.get("/donate", headers=auth_headers).json()["donators"] == []

    @pytest.mark.parametrize(
        "method,path",
        [
            ("put", "/donate/999999"),
            ("put", "/donate/999999/disallow"),
            ("delete", "/donate/999999"),
        ],
    )
    def test_unknown_donator_is_404(self, client, auth_headers, method, path):
        response = getattr(client, method)(path, headers=auth_headers)

        assert response.status_code == 404
        assert response.json() == {"status": "fail", "error": "Donator not found"}

    def test_non_numeric_id_is_400(self, client, auth_headers):
        response = client.delete("/donate/abc", headers=auth_headers)

        assert response.status_code == 400

    @pytest.mark.parametrize("path", ["/donate", "/donate/allowed", "/donate/unallowed"])
    def test_lists_require_key(self, client, path):
        assert client.get(path).status_code == 401

    def test_wrong_key_is_401_even_for_existing_donator(self, client, donator_id, donator_repo):
        response = client.delete(f"/donate/{donator_id}", headers={"x-api-key": "wrong"})

        assert response.status_code == 401
        assert donator_id in donator_repo.donators
