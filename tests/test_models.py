"""Tests for match types, team submissions and small helpers."""

from __future__ import annotations

import datetime
import unittest

from rushx.errors import ValidationError
from rushx.referral.utils import generate_code, percentage_of, referral_link
from rushx.teams.models import TeamDetails, TeamSubmission
from rushx.teams.utils import invite_code, join_order_key, normalize_tag
from rushx.tournament.models import MatchType, team_capacity


class MatchTypeTestCase(unittest.TestCase):
    def test_capacities(self) -> None:
        self.assertEqual(team_capacity("solo"), 1)
        self.assertEqual(team_capacity("duo"), 2)
        self.assertEqual(team_capacity("squad"), 4)

    def test_parse_is_case_insensitive(self) -> None:
        self.assertIs(MatchType.parse(" Squad "), MatchType.SQUAD)
        self.assertIs(MatchType.parse(MatchType.DUO), MatchType.DUO)

    def test_only_solo_disallows_teams(self) -> None:
        self.assertFalse(MatchType.SOLO.allows_teams)
        self.assertTrue(MatchType.DUO.allows_teams)
        self.assertTrue(MatchType.SQUAD.allows_teams)

    def test_unknown_match_type(self) -> None:
        with self.assertRaises(ValidationError):
            MatchType.parse("trio")


class TeamSubmissionTestCase(unittest.TestCase):
    def test_to_document_normalizes(self) -> None:
        doc = TeamSubmission(
            name="  Night Owls ",
            tag=" owlsx",
            description=" We play late. ",
            privacy="Closed",
        ).to_document()
        self.assertEqual(doc["team_name"], "Night Owls")
        self.assertEqual(doc["team_tag"], "OWLS")
        self.assertEqual(doc["team_description"], "We play late.")
        self.assertIsNone(doc["team_logo"])
        self.assertEqual(doc["privacy"], "closed")

    def test_name_required(self) -> None:
        with self.assertRaises(ValidationError):
            TeamSubmission(name="   ", tag="ABC").validate()

    def test_name_too_long(self) -> None:
        with self.assertRaises(ValidationError):
            TeamSubmission(name="x" * 51, tag="ABC").validate()

    def test_tag_required(self) -> None:
        with self.assertRaises(ValidationError):
            TeamSubmission(name="Owls", tag="  ").validate()

    def test_description_too_long(self) -> None:
        with self.assertRaises(ValidationError):
            TeamSubmission(name="Owls", tag="OWL", description="d" * 501).validate()

    def test_bad_privacy(self) -> None:
        with self.assertRaises(ValidationError):
            TeamSubmission(name="Owls", tag="OWL", privacy="secret").validate()


class TeamDetailsTestCase(unittest.TestCase):
    def test_status(self) -> None:
        open_team = TeamDetails(team={"privacy": "open"}, capacity=2)  # type: ignore[typeddict-item]
        self.assertEqual(open_team.status, "open")

        closed_team = TeamDetails(team={"privacy": "closed"}, capacity=2)  # type: ignore[typeddict-item]
        self.assertEqual(closed_team.status, "closed")

        closed_team.members = [{"user_id": "a"}, {"user_id": "b"}]
        self.assertTrue(closed_team.is_full)
        self.assertEqual(closed_team.status, "full")


class HelpersTestCase(unittest.TestCase):
    def test_generate_code(self) -> None:
        code = generate_code()
        self.assertEqual(len(code), 8)
        self.assertTrue(code.isalnum())
        self.assertEqual(code, code.upper())

    def test_percentage_of(self) -> None:
        self.assertEqual(percentage_of(1000, 10), 100.0)
        self.assertEqual(percentage_of(99.99, 10), 10.0)

    def test_referral_link(self) -> None:
        self.assertEqual(
            referral_link("https://rushx.in/", "abc12345"),
            "https://rushx.in/tournaments?ref=ABC12345",
        )

    def test_normalize_tag(self) -> None:
        self.assertEqual(normalize_tag(" rxzq9 "), "RXZQ")
        self.assertEqual(normalize_tag(None), "")

    def test_invite_code(self) -> None:
        team = {"team_tag": "RXZ", "tournament_id": "abcdef123456"}
        self.assertEqual(invite_code(team), "RXZ-abcdef12")

    def test_join_order_key_ties_broken_by_id(self) -> None:
        ts = datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc)
        members = [
            {"id": "t1_b", "joined_at": ts},
            {"id": "t1_a", "joined_at": ts},
            {"id": "t1_c", "joined_at": None},
        ]
        ordered = sorted(members, key=join_order_key)
        self.assertEqual([m["id"] for m in ordered], ["t1_a", "t1_b", "t1_c"])


if __name__ == "__main__":
    unittest.main()
