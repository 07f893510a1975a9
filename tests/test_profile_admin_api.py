"""
API tests for profiles, the leaderboard and the moderation queue.
"""
import pytest

import main
import security
from conftest import make_headers, review_body
from models import Profile, UserRole
from schemas import TokenData


class TestProfile:

    def test_profile_created_from_token(self, client):
        me = client.get("/auth/me", headers=make_headers("new-user", display_name="Priya")).json()
        assert me["user_id"] == "new-user"
        assert me["display_name"] == "Priya"
        assert me["points"] == 0
        assert me["role"] == "user"

    def test_display_name_falls_back_to_email(self, client):
        me = client.get("/auth/me", headers=make_headers("u9", email="kavya@example.edu")).json()
        assert me["display_name"] == "kavya"

    @pytest.mark.parametrize("email", ["dev@college.local", "qa@lab.test", "root@localhost"])
    def test_special_use_email_domains_authenticate(self, client, email):
        resp = client.get("/auth/me", headers=make_headers("student-9", email=email))
        assert resp.status_code == 200
        assert resp.json()["display_name"] == email.split("@")[0]

    def test_concurrent_first_request_reuses_profile(self, session_factory, monkeypatch):
        other = session_factory()
        other.add(Profile(user_id="race-1", display_name="First"))
        other.commit()
        other.close()

        # the lookup misses once, as if the other request had not committed yet
        lookup = security.get_profile
        calls = []

        def late_lookup(session, user_id):
            calls.append(user_id)
            return None if len(calls) == 1 else lookup(session, user_id)

        monkeypatch.setattr(security, "get_profile", late_lookup)
        session = session_factory()
        try:
            profile = security.get_or_create_profile(session, TokenData(user_id="race-1", display_name="Second"))
            assert profile.display_name == "First"
            assert session.query(Profile).filter(Profile.user_id == "race-1").count() == 1
        finally:
            session.close()

    def test_profile_lists_own_reviews(self, client, add_faculty, other_headers, monkeypatch):
        first = add_faculty(name="One Faculty")
        second = add_faculty(name="Two Faculty")
        client.post(f"/faculty/{first['id']}/reviews", json=review_body(is_anonymous=True), headers=other_headers)
        monkeypatch.setattr(main, "REVIEWS_REQUIRE_APPROVAL", True)
        client.post(f"/faculty/{second['id']}/reviews", json=review_body(), headers=other_headers)

        data = client.get("/profile/me", headers=other_headers).json()
        assert data["approved_review_count"] == 1
        assert {r["status"] for r in data["reviews"]} == {"approved", "pending"}
        assert {r["faculty_name"] for r in data["reviews"]} == {"One Faculty", "Two Faculty"}

    def test_update_profile(self, client, student_headers):
        resp = client.patch(
            "/profile/me",
            json={"display_name": " Asha K ", "bio": "CSE 3rd year", "avatar_url": "https://cdn.example.edu/a.png"},
            headers=student_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["display_name"] == "Asha K"
        assert resp.json()["bio"] == "CSE 3rd year"

    def test_blank_display_name_rejected(self, client, student_headers):
        resp = client.patch("/profile/me", json={"display_name": " "}, headers=student_headers)
        assert resp.status_code == 400


class TestLeaderboard:

    def test_top_and_recent_users(self, client, db):
        for i, points in enumerate([5, 50, 0, 30, 10, 20]):
            db.add(Profile(user_id=f"user-{i}", display_name=f"User {i}", points=points))
            db.commit()

        board = client.get("/leaderboard").json()
        assert [u["points"] for u in board["top_users"]] == [50, 30, 20, 10, 5]
        assert len(board["recent_users"]) == 5
        assert board["recent_users"][0]["user_id"] == "user-5"


class TestModeration:

    def test_non_admin_denied(self, client, student_headers):
        resp = client.get("/admin/pending", headers=student_headers)
        assert resp.status_code == 403
        assert resp.json()["detail"] == "Access denied: Admin only"

    def test_admin_via_user_roles(self, client, db):
        db.add(UserRole(user_id="mod-1", role="admin"))
        db.commit()
        assert client.get("/admin/pending", headers=make_headers("mod-1")).status_code == 200

    def test_approve_pending_faculty_awards_creator(self, client, admin_headers, student_headers, monkeypatch):
        monkeypatch.setattr(main, "FACULTY_REQUIRE_APPROVAL", True)
        faculty = client.post(
            "/faculty", json={"name": "Pending P", "department": "MECH"}, headers=student_headers,
        ).json()

        pending = client.get("/admin/pending", headers=admin_headers).json()
        assert [f["id"] for f in pending["faculty"]] == [faculty["id"]]

        resp = client.post(f"/admin/faculty/{faculty['id']}/approve", headers=admin_headers)
        assert resp.json()["approved"] is True
        assert client.get("/auth/me", headers=student_headers).json()["points"] == 20

        # approving twice does not pay twice
        client.post(f"/admin/faculty/{faculty['id']}/approve", headers=admin_headers)
        assert client.get("/auth/me", headers=student_headers).json()["points"] == 20

    def test_approve_faculty_pays_for_first_review(self, client, admin_headers, student_headers, monkeypatch):
        monkeypatch.setattr(main, "FACULTY_REQUIRE_APPROVAL", True)
        created = client.post(
            "/faculty",
            json={"name": "Pending P", "department": "MECH", "review": review_body()},
            headers=student_headers,
        ).json()
        assert created["points_awarded"] == 0

        client.post(f"/admin/faculty/{created['id']}/approve", headers=admin_headers)
        summary = client.get(f"/faculty/{created['id']}/reviews", headers=student_headers).json()
        assert summary["count"] == 1
        assert client.get("/auth/me", headers=student_headers).json()["points"] == 30

        client.post(f"/admin/faculty/{created['id']}/approve", headers=admin_headers)
        assert client.get("/auth/me", headers=student_headers).json()["points"] == 30

    def test_reject_faculty_removes_it(self, client, admin_headers, student_headers, other_headers, add_faculty):
        faculty = add_faculty()
        client.post(f"/faculty/{faculty['id']}/reviews", json=review_body(), headers=other_headers)
        client.post(f"/faculty/{faculty['id']}/star", headers=other_headers)

        resp = client.post(f"/admin/faculty/{faculty['id']}/reject", headers=admin_headers)
        assert resp.status_code == 200
        assert client.get(f"/faculty/{faculty['id']}", headers=student_headers).status_code == 404
        assert client.get("/profile/me", headers=other_headers).json()["reviews"] == []

    def test_review_moderation(self, client, admin_headers, student_headers, other_headers, add_faculty, monkeypatch):
        faculty = add_faculty()
        monkeypatch.setattr(main, "REVIEWS_REQUIRE_APPROVAL", True)
        review_id = client.post(
            f"/faculty/{faculty['id']}/reviews", json=review_body(), headers=other_headers,
        ).json()["review_id"]

        pending = client.get("/admin/pending", headers=admin_headers).json()
        assert [r["id"] for r in pending["reviews"]] == [review_id]

        approved = client.post(f"/admin/reviews/{review_id}/approve", headers=admin_headers).json()
        assert approved["status"] == "approved"
        assert client.get("/auth/me", headers=other_headers).json()["points"] == 10
        summary = client.get(f"/faculty/{faculty['id']}/reviews", headers=student_headers).json()
        assert summary["count"] == 1

        rejected = client.post(f"/admin/reviews/{review_id}/reject", headers=admin_headers).json()
        assert rejected["status"] == "rejected"
        assert rejected["rejection_reason"] == "Inappropriate content"

    def test_reject_review_with_reason(self, client, admin_headers, other_headers, add_faculty):
        faculty = add_faculty()
        review_id = client.post(
            f"/faculty/{faculty['id']}/reviews", json=review_body(), headers=other_headers,
        ).json()["review_id"]

        rejected = client.post(
            f"/admin/reviews/{review_id}/reject", json={"reason": "Personal attack"}, headers=admin_headers,
        ).json()
        assert rejected["rejection_reason"] == "Personal attack"

    def test_comment_moderation(self, client, admin_headers, student_headers, other_headers, add_faculty, monkeypatch):
        faculty = add_faculty()
        review_id = client.post(
            f"/faculty/{faculty['id']}/reviews", json=review_body(), headers=other_headers,
        ).json()["review_id"]
        monkeypatch.setattr(main, "COMMENTS_REQUIRE_APPROVAL", True)
        comment_id = client.post(
            f"/reviews/{review_id}/comments", json={"content": "Hmm"}, headers=student_headers,
        ).json()["id"]

        approved = client.post(f"/admin/comments/{comment_id}/approve", headers=admin_headers).json()
        assert approved["status"] == "approved"
        assert len(client.get(f"/reviews/{review_id}/comments", headers=student_headers).json()) == 1

        rejected = client.post(f"/admin/comments/{comment_id}/reject", headers=admin_headers).json()
        assert rejected["status"] == "rejected"
        assert client.get(f"/reviews/{review_id}/comments", headers=student_headers).json() == []

    @pytest.mark.parametrize("path", [
        "/admin/faculty/999/approve",
        "/admin/reviews/999/approve",
        "/admin/comments/999/reject",
    ])
    def test_unknown_items(self, client, admin_headers, path):
        assert client.post(path, headers=admin_headers).status_code == 404
