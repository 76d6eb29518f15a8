from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from fastapi.testclient import TestClient

from backend.app.core.config import Settings
from backend.app.core.errors import StorageError
from backend.app.main import create_app


class TestJobsApi(unittest.TestCase):
    def setUp(self) -> None:
        self._td = tempfile.TemporaryDirectory()
        self.settings = Settings(data_dir=Path(self._td.name), jwt_secret="test-secret")
        self.app = create_app(self.settings)
        self.client = TestClient(self.app)
        for name in ("alice", "bob", "carol"):
            r = self.client.post("/users", json={"username": name, "password": f"{name}-pw"})
            self.assertEqual(r.status_code, 201, r.text)

    def tearDown(self) -> None:
        self.client.close()
        self._td.cleanup()

    def _auth(self, name: str) -> tuple[str, str]:
        return (name, f"{name}-pw")

    def _create(self, author: str = "alice") -> str:
        r = self.client.post(
            "/jobs",
            json={"description": "fix fence", "imageLocation": "img://1"},
            auth=self._auth(author),
        )
        self.assertEqual(r.status_code, 200, r.text)
        body = r.json()
        self.assertEqual(body["message"], "success")
        return body["createdId"]

    def test_scenario(self) -> None:
        job_id = self._create()

        r = self.client.get(f"/jobs/{job_id}")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(
            r.json(),
            {"id": job_id, "description": "fix fence", "imageLocation": "img://1", "author": "alice", "runner": ""},
        )

        r = self.client.post(f"/jobs/{job_id}/checkout", auth=self._auth("bob"))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"message": "success", "checkedId": job_id})
        self.assertEqual(self.client.get(f"/jobs/{job_id}").json()["runner"], "bob")

        r = self.client.put(f"/jobs/{job_id}/checkout", auth=self._auth("carol"))
        self.assertEqual(r.status_code, 409)
        self.assertEqual(r.json()["error"], "conflict")

        r = self.client.put(f"/jobs/{job_id}/checkin", auth=self._auth("bob"))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(self.client.get(f"/jobs/{job_id}").json()["runner"], "")

        r = self.client.delete(f"/jobs/{job_id}", auth=self._auth("alice"))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json(), {"message": "success"})

        r = self.client.get(f"/jobs/{job_id}")
        self.assertEqual(r.status_code, 404)
        self.assertEqual(r.json()["error"], "not_found")

    def test_list_jobs_and_available_filter(self) -> None:
        free = self._create()
        taken = self._create()
        self.client.post(f"/jobs/{taken}/checkout", auth=self._auth("bob"))

        self.assertEqual([j["id"] for j in self.client.get("/jobs").json()], [free, taken])
        self.assertEqual([j["id"] for j in self.client.get("/jobs?available=true").json()], [free])

    def test_delete_by_non_author_is_forbidden(self) -> None:
        job_id = self._create()
        r = self.client.delete(f"/jobs/{job_id}", auth=self._auth("bob"))
        self.assertEqual(r.status_code, 403)
        self.assertEqual(len(self.client.get("/jobs").json()), 1)

    def test_mutations_require_credentials(self) -> None:
        r = self.client.post("/jobs", json={"description": "x", "imageLocation": ""})
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.headers["www-authenticate"], "Basic")

        r = self.client.post("/jobs", json={"description": "x"}, auth=("alice", "wrong"))
        self.assertEqual(r.status_code, 401)
        self.assertEqual(r.json()["error"], "unauthenticated")

    def test_bearer_token(self) -> None:
        r = self.client.post("/auth/token", auth=self._auth("alice"))
        self.assertEqual(r.status_code, 200)
        token = r.json()["access_token"]
        headers = {"Authorization": f"Bearer {token}"}

        r = self.client.post("/jobs", json={"description": "via token"}, headers=headers)
        self.assertEqual(r.status_code, 200, r.text)
        job_id = r.json()["createdId"]

        me = self.client.get("/auth/me", headers=headers).json()
        self.assertEqual(me, {"username": "alice", "authored": [job_id], "running": []})

        r = self.client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        self.assertEqual(r.status_code, 401)

    def test_user_profile(self) -> None:
        job_id = self._create()
        self.client.post(f"/jobs/{job_id}/checkout", auth=self._auth("bob"))

        r = self.client.get("/users/bob")
        self.assertEqual(r.json(), {"username": "bob", "authored": [], "running": [job_id]})
        self.assertNotIn("password", r.json())
        self.assertEqual(self.client.get("/users/mallory").status_code, 404)

    def test_register_conflict_and_validation(self) -> None:
        r = self.client.post("/users", json={"username": "alice", "password": "x"})
        self.assertEqual(r.status_code, 409)
        r = self.client.post("/users", json={"username": "", "password": "x"})
        self.assertEqual(r.status_code, 422)

    def test_create_requires_description(self) -> None:
        r = self.client.post("/jobs", json={"imageLocation": "img"}, auth=self._auth("alice"))
        self.assertEqual(r.status_code, 422)

    def test_storage_error_is_reported_not_fatal(self) -> None:
        board = self.app.state.board
        with mock.patch.object(board.jobs, "write", side_effect=StorageError("disk full")):
            r = self.client.post("/jobs", json={"description": "x"}, auth=self._auth("alice"))
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json()["error"], "storage")

        # Still serving, and the job was not recorded.
        self.assertEqual(self.client.get("/jobs").json(), [])
        self.assertEqual(self.client.get("/healthz").json(), {"ok": True})

    def test_corrupt_file_is_reported_as_storage_error(self) -> None:
        self.settings.jobs_path.write_bytes(b'{"1": {"id": "\xff"}}')
        r = self.client.get("/jobs")
        self.assertEqual(r.status_code, 500)
        self.assertEqual(r.json()["error"], "storage")

    def test_register_rejects_padded_username(self) -> None:
        r = self.client.post("/users", json={"username": " dave", "password": "x"})
        self.assertEqual(r.status_code, 422)
        self.assertEqual(r.json()["error"], "invalid")
        self.assertEqual(self.client.get("/users/dave").status_code, 404)

    def test_error_body_is_documented(self) -> None:
        schema = self.client.get("/openapi.json").json()
        self.assertIn("ErrorResponse", schema["components"]["schemas"])
        responses = schema["paths"]["/jobs/{job_id}/checkin"]["put"]["responses"]
        self.assertEqual(responses["409"]["content"]["application/json"]["schema"]["$ref"], "#/components/schemas/ErrorResponse")


if __name__ == "__main__":
    unittest.main()
