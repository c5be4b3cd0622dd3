"""Tests for NotificationService."""

import unittest
from unittest.mock import MagicMock

from mockfirestore import MockFirestore

from rushx.notifications.services import NotificationService
from tests.conftest import patch_firestore, patch_mockfirestore


class NotificationServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        patch_mockfirestore()
        self.db = MockFirestore()
        patch_firestore(self, self.db)

    def test_notify_writes_unread_record(self) -> None:
        ok = NotificationService.notify(
            self.db, "user1", "Hello", "Welcome!", "success", related_team_id="team1"
        )

        self.assertTrue(ok)
        docs = [d.to_dict() for d in self.db.collection("notifications").stream()]
        self.assertEqual(len(docs), 1)
        self.assertEqual(docs[0]["type"], "success")
        self.assertEqual(docs[0]["related_team_id"], "team1")
        self.assertFalse(docs[0]["read"])

    def test_notify_failure_is_logged_not_raised(self) -> None:
        db = MagicMock()
        db.collection.return_value.add.side_effect = RuntimeError("unavailable")

        with self.assertLogs(level="ERROR"):
            ok = NotificationService.notify(db, "user1", "Hello", "Welcome!")

        self.assertFalse(ok)


if __name__ == "__main__":
    unittest.main()
