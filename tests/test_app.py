"""Tests for the app factory."""

import os
import unittest
from unittest.mock import patch

from flask import request, session
from mockfirestore import MockFirestore

from rushx import create_app
from rushx.auth.decorators import login_required
from tests.conftest import patch_firestore, patch_mockfirestore


class AppTestCase(unittest.TestCase):
    """Test case for the app factory."""

    def setUp(self):
        patch_mockfirestore()
        self.db = MockFirestore()
        patch_firestore(self, self.db)
        self.app = create_app({"TESTING": True, "WTF_CSRF_ENABLED": False})
        self.client = self.app.test_client()

    def test_404_error_handler(self):
        """Unknown routes get a JSON error body."""
        response = self.client.get("/non_existent_page")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json()["status"], "error")

    def test_https_scheme_with_proxy_headers(self):
        """Test that X-Forwarded-Proto header is respected."""

        @self.app.route("/test_scheme")
        def test_scheme():
            return request.scheme

        response = self.client.get(
            "/test_scheme", headers={"X-Forwarded-Proto": "https"}
        )
        self.assertEqual(response.data.decode(), "https")

    def test_unknown_session_user_is_logged_out(self):
        """A session pointing at a deleted user is cleared."""

        @self.app.route("/whoami")
        def whoami():
            return {"user_id": session.get("user_id")}

        with self.client.session_transaction() as sess:
            sess["user_id"] = "ghost"

        response = self.client.get("/whoami")
        self.assertIsNone(response.get_json()["user_id"])

    def test_config_from_environment(self):
        """Only the secret key is read from the environment."""
        with patch.dict(os.environ, {"SECRET_KEY": "s3cret"}):
            app = create_app({"TESTING": True})
        self.assertEqual(app.config["SECRET_KEY"], "s3cret")
        self.assertNotIn("APP_VERSION", app.config)

    def test_login_required_rejects_anonymous_and_admits_users(self):
        """Protected views need a session user backed by a user document."""

        @self.app.route("/protected")
        @login_required
        def protected():
            return {"ok": True}

        self.assertEqual(self.client.get("/protected").status_code, 401)

        self.db.collection("users").document("user1").set({"username": "viper"})
        with self.client.session_transaction() as sess:
            sess["user_id"] = "user1"
        response = self.client.get("/protected")
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.get_json()["ok"])


if __name__ == "__main__":
    unittest.main()
