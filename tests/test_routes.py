"""HTTP tests through the Flask test client."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import IntegrityError

from habitcast.services import identities as identity_service


@pytest.mark.parametrize(
    "path",
    ["/identities/", "/habits/", "/scorecard/", "/review/weekly", "/review/reset", "/onboarding/", "/profile/"],
)
def test_routes_respond(path, client, auth_headers):
    response = client.get(path, headers=auth_headers)
    assert response.status_code == 200


@pytest.mark.parametrize("path", ["/identities/", "/habits/", "/scorecard/", "/profile/"])
def test_missing_user_gets_empty_401(path, client):
    response = client.get(path)
    assert response.status_code == 401
    assert response.data == b""


class TestIdentityRoutes:
    def test_create_and_list(self, client, auth_headers):
        response = client.post("/identities/", json={"completion": "reads daily"}, headers=auth_headers)
        assert response.status_code == 201
        assert response.get_json()["statement"] == "I am a person who reads daily."

        board = client.get("/identities/", headers=auth_headers).get_json()["identities"]
        assert [row["statement"] for row in board] == ["I am a person who reads daily."]

    def test_validation_error_shape(self, client, auth_headers):
        response = client.post("/identities/", json={"completion": "no"}, headers=auth_headers)
        assert response.status_code == 422
        body = response.get_json()
        assert "statement" in body["fields"]
        assert body["error"]

    def test_breaks(self, client, auth_headers):
        identity = client.post("/identities/", json={"completion": "sleeps well"}, headers=auth_headers).get_json()
        created = client.post(
            f"/identities/{identity['id']}/breaks",
            json={"name": "Phone in bed", "design_break": {"invisible": {"remove_cues": " charger outside "}}},
            headers=auth_headers,
        )
        assert created.status_code == 201
        assert created.get_json()["design_break"] == {"invisible": {"remove_cues": "charger outside"}}

        listed = client.get(f"/identities/{identity['id']}/breaks", headers=auth_headers).get_json()
        assert listed["breaks"][0]["design_break"]["difficult"]["add_steps"] == ""

    def test_other_users_identity_is_404(self, client, auth_headers, other_ctx):
        theirs = identity_service.create_identity(other_ctx, "writes")
        response = client.delete(f"/identities/{theirs.id}", headers=auth_headers)
        assert response.status_code == 404


class TestHabitRoutes:
    def test_lifecycle(self, client, auth_headers):
        created = client.post(
            "/habits/",
            json={"name": "Read", "design_build": {"easy": {"two_minute_rule": "One page"}}},
            headers=auth_headers,
        )
        assert created.status_code == 201
        habit = created.get_json()
        assert habit["two_minute_version"] == "One page"
        assert habit["has_design_fields"] is True

        edit = client.get(f"/habits/{habit['id']}", headers=auth_headers).get_json()
        assert edit["design_build"]["obvious"]["clear_cue"] == ""

        patched = client.patch(f"/habits/{habit['id']}", json={"name": "Read more"}, headers=auth_headers)
        assert patched.get_json()["name"] == "Read more"
        assert patched.get_json()["two_minute_version"] == "One page"

        client.post(f"/habits/{habit['id']}/archive", headers=auth_headers)
        listing = client.get("/habits/", headers=auth_headers).get_json()
        assert listing["habits"] == []
        assert [h["id"] for h in listing["archived"]] == [habit["id"]]

        restored = client.post(f"/habits/{habit['id']}/restore", headers=auth_headers).get_json()
        assert restored["archived_at"] is None
        assert restored["current_streak"] == 0

        assert client.delete(f"/habits/{habit['id']}", headers=auth_headers).status_code == 204

    def test_bad_anchor_payload(self, client, auth_headers):
        response = client.post(
            "/habits/", json={"name": "Read", "anchor": {"kind": "habit"}}, headers=auth_headers
        )
        assert response.status_code == 422
        assert "anchor" in response.get_json()["fields"]

    def test_complete(self, client, auth_headers):
        habit = client.post("/habits/", json={"name": "Walk"}, headers=auth_headers).get_json()
        done = client.post(f"/habits/{habit['id']}/complete", headers=auth_headers).get_json()
        assert done["current_streak"] == 1
        assert done["last_completed_date"] is not None


class TestScorecardRoutes:
    def test_create_reorder_and_view(self, client, auth_headers):
        ids = []
        for name, rating in (("Journal", "+"), ("Phone", "-"), ("Coffee", "=")):
            response = client.post(
                "/scorecard/",
                json={"habit_name": name, "rating": rating, "time_of_day": "morning"},
                headers=auth_headers,
            )
            assert response.status_code == 201
            ids.append(response.get_json()["id"])

        moved = client.post(
            "/scorecard/reorder",
            json={"entry_id": ids[2], "time_of_day": "morning", "position": 0},
            headers=auth_headers,
        )
        assert moved.get_json()["layout"]["morning"] == [ids[2], ids[0], ids[1]]

        view = client.get("/scorecard/", headers=auth_headers).get_json()
        assert view["summary"]["net"] == 0
        assert view["take_action"]["focus_habit_name"] == "Phone"

    def test_negative_position_rejected(self, client, auth_headers):
        response = client.post(
            "/scorecard/reorder",
            json={"entry_id": 1, "time_of_day": "morning", "position": -1},
            headers=auth_headers,
        )
        assert response.status_code == 422


class TestWeeklyReviewRoutes:
    def test_flow(self, client, auth_headers):
        habit = client.post("/habits/", json={"name": "Walk"}, headers=auth_headers).get_json()

        blocked = client.post("/review/weekly/advance", json={"step": "rate"}, headers=auth_headers)
        assert blocked.status_code == 422

        client.post("/review/weekly/rate", json={"habit_id": habit["id"], "rating": "-"}, headers=auth_headers)
        state = client.post("/review/weekly/advance", json={"step": "rate"}, headers=auth_headers).get_json()
        assert state["step"] == "friction"
        assert state["can_advance"] is False

        client.post(
            "/review/weekly/friction",
            json={"habit_id": habit["id"], "friction": "Too busy", "step": "friction"},
            headers=auth_headers,
        )
        state = client.post("/review/weekly/advance", json={"step": "friction"}, headers=auth_headers).get_json()
        assert state["suggestions"][0]["advice"] == "Move time"

        applied = client.post(
            "/review/weekly/apply", json={"habit_id": habit["id"], "accept": True}, headers=auth_headers
        ).get_json()
        assert applied["suggestions"][0]["applied"] is True

    def test_cannot_skip_to_later_step(self, client, auth_headers):
        client.post("/habits/", json={"name": "Walk"}, headers=auth_headers)

        skipped = client.post("/review/weekly/advance", json={"step": "suggest"}, headers=auth_headers)

        assert skipped.status_code == 422
        assert "rate" in skipped.get_json()["error"]

    def test_reset(self, client, auth_headers):
        habit = client.post("/habits/", json={"name": "Run 5k"}, headers=auth_headers).get_json()
        picked = client.get("/review/reset", headers=auth_headers).get_json()
        assert [h["id"] for h in picked["habits"]] == [habit["id"]]
        shrunk = client.post(
            f"/review/reset/{habit['id']}", json={"two_minute_version": "Shoes on"}, headers=auth_headers
        ).get_json()
        assert shrunk["two_minute_version"] == "Shoes on"
        assert shrunk["current_streak"] == 0


class TestOnboardingRoutes:
    def test_flow(self, client, auth_headers):
        assert client.get("/onboarding/", headers=auth_headers).get_json()["required"] is True
        step = client.post("/onboarding/identity", json={"completion": "moves"}, headers=auth_headers).get_json()
        assert step["step"] == "habit"
        step = client.post(
            "/onboarding/habit",
            json={"identity_id": step["identity"]["id"], "name": "Walk", "two_minute_version": "Shoes"},
            headers=auth_headers,
        ).get_json()
        habit_id = step["habit"]["id"]
        step = client.post(
            "/onboarding/laws",
            json={"habit_id": habit_id, "cue_type": "after", "cue_value": "After lunch"},
            headers=auth_headers,
        ).get_json()
        assert step["habit"]["intention_text"] == "I will After lunch"
        step = client.post("/onboarding/first-rep", json={"habit_id": habit_id}, headers=auth_headers).get_json()
        assert step["step"] == "done"
        assert client.get("/onboarding/", headers=auth_headers).get_json()["required"] is False


class TestProfileRoutes:
    def test_display_name(self, client, auth_headers):
        profile = client.get("/profile/", headers=auth_headers).get_json()
        assert profile["email"] == "tester@example.com"
        updated = client.patch("/profile/", json={"display_name": "  " + "S" * 60}, headers=auth_headers)
        assert updated.get_json()["display_name"] == "S" * 50


def test_store_errors_are_shown_verbatim(client, auth_headers, monkeypatch):
    def _fail(*args, **kwargs):
        raise IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: identity.id"))

    monkeypatch.setattr(identity_service, "scoreboard", _fail)
    response = client.get("/identities/", headers=auth_headers)
    assert response.status_code == 500
    assert response.get_json() == {"error": "UNIQUE constraint failed: identity.id"}
