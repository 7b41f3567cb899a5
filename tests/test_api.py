"""HTTP tests: authorization enforced end to end through the FastAPI routes."""

import unittest

from fastapi.testclient import TestClient

from juice.core.config import settings
from juice.core.database import get_db
from juice.main import app
from juice.models import Comment, Role, User
from juice.services.users import create_role, create_user
from tests.helpers import make_session_factory

API = settings.API_V1_PREFIX
PASSWORD = "test1234"


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class ApiTestCase(unittest.TestCase):
    """
    Seeds: alice and bob (Author role, non-admin), dave (no role),
    carol (Admin role).
    """

    def setUp(self) -> None:
        self.factory = make_session_factory()

        def override_get_db():
            db = self.factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.addCleanup(app.dependency_overrides.clear)
        self.client = TestClient(app)

        db = self.factory()
        try:
            admin_role = create_role(db, "Admin", admin=True)
            author_role = create_role(db, "Author")
            self.admin_role_id = admin_role.id
            self.author_role_id = author_role.id
            self.ids = {}
            for name, role_id in (
                ("alice", author_role.id),
                ("bob", author_role.id),
                ("dave", None),
                ("carol", admin_role.id),
            ):
                user = create_user(db, name, f"{name}@example.com", PASSWORD, role_id=role_id)
                self.ids[name] = user.id
        finally:
            db.close()

        self.tokens = {name: self._login(name)["access_token"] for name in self.ids}

    def _login(self, username: str) -> dict:
        resp = self.client.post(f"{API}/sessions", json={"username": username, "password": PASSWORD})
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()

    def _create_post(self, username: str, title: str = "Some Post") -> dict:
        resp = self.client.post(
            f"{API}/posts",
            json={"title": title, "body": "**And** the body of some post"},
            headers=_auth(self.tokens[username]),
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()


class TestHealthAndRoot(ApiTestCase):
    def test_health_reports_database(self) -> None:
        resp = self.client.get(f"{API}/health/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["database"], "connected")

    def test_root(self) -> None:
        self.assertEqual(self.client.get("/").status_code, 200)


class TestSessions(ApiTestCase):
    def test_bad_password(self) -> None:
        resp = self.client.post(f"{API}/sessions", json={"username": "alice", "password": "wrong-pass"})
        self.assertEqual(resp.status_code, 401)

    def test_unknown_user(self) -> None:
        resp = self.client.post(f"{API}/sessions", json={"username": "nobody", "password": PASSWORD})
        self.assertEqual(resp.status_code, 401)

    def test_logout_revokes_token(self) -> None:
        login = self._login("alice")
        token = login["access_token"]
        self._create_post_with(token, expected=201)

        resp = self.client.delete(f"{API}/sessions/{login['session_id']}", headers=_auth(token))
        self.assertEqual(resp.status_code, 204)

        self._create_post_with(token, expected=401)
        # Other sessions of the same user are unaffected.
        self._create_post_with(self.tokens["alice"], expected=201)

    def test_cannot_end_someone_elses_session(self) -> None:
        login = self._login("alice")
        resp = self.client.delete(
            f"{API}/sessions/{login['session_id']}", headers=_auth(self.tokens["bob"])
        )
        self.assertEqual(resp.status_code, 403)

    def test_admin_can_end_any_session(self) -> None:
        login = self._login("alice")
        resp = self.client.delete(
            f"{API}/sessions/{login['session_id']}", headers=_auth(self.tokens["carol"])
        )
        self.assertEqual(resp.status_code, 204)

    def test_missing_session(self) -> None:
        resp = self.client.delete(f"{API}/sessions/does-not-exist", headers=_auth(self.tokens["alice"]))
        self.assertEqual(resp.status_code, 404)

    def test_garbage_token_rejected_on_public_route(self) -> None:
        resp = self.client.get(f"{API}/posts", headers=_auth("not-a-jwt"))
        self.assertEqual(resp.status_code, 401)

    def _create_post_with(self, token: str, expected: int) -> None:
        resp = self.client.post(
            f"{API}/posts", json={"title": "t", "body": "b"}, headers=_auth(token)
        )
        self.assertEqual(resp.status_code, expected, resp.text)


class TestPosts(ApiTestCase):
    def test_anonymous_can_read(self) -> None:
        post = self._create_post("alice")
        self.assertEqual(self.client.get(f"{API}/posts").status_code, 200)
        resp = self.client.get(f"{API}/posts/{post['id']}")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["body"], "**And** the body of some post")

    def test_anonymous_cannot_create(self) -> None:
        resp = self.client.post(f"{API}/posts", json={"title": "t", "body": "b"})
        self.assertEqual(resp.status_code, 401)

    def test_owner_is_requester(self) -> None:
        post = self._create_post("dave")
        self.assertEqual(post["user_id"], self.ids["dave"])

    def test_owner_cannot_be_changed(self) -> None:
        post = self._create_post("alice")
        resp = self.client.patch(
            f"{API}/posts/{post['id']}",
            json={"title": "New title", "user_id": self.ids["bob"]},
            headers=_auth(self.tokens["alice"]),
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["title"], "New title")
        self.assertEqual(resp.json()["user_id"], self.ids["alice"])

    def test_other_user_denied_admin_allowed(self) -> None:
        post = self._create_post("alice")
        url = f"{API}/posts/{post['id']}"

        resp = self.client.patch(url, json={"title": "Hijacked"}, headers=_auth(self.tokens["bob"]))
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(self.client.get(url).json()["title"], "Some Post")

        resp = self.client.patch(url, json={"title": "Edited by admin"}, headers=_auth(self.tokens["carol"]))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["title"], "Edited by admin")

    def test_delete_rules(self) -> None:
        post = self._create_post("alice")
        url = f"{API}/posts/{post['id']}"
        self.assertEqual(self.client.delete(url, headers=_auth(self.tokens["bob"])).status_code, 403)
        self.assertEqual(self.client.delete(url, headers=_auth(self.tokens["carol"])).status_code, 204)
        self.assertEqual(self.client.get(url).status_code, 404)

    def test_delete_post_removes_comments(self) -> None:
        post = self._create_post("alice")
        comment = self.client.post(
            f"{API}/posts/{post['id']}/comments", json={"author": "Visitor", "body": "Hi"}
        ).json()
        self.client.delete(f"{API}/posts/{post['id']}", headers=_auth(self.tokens["alice"]))
        resp = self.client.get(f"{API}/comments/{comment['id']}", headers=_auth(self.tokens["carol"]))
        self.assertEqual(resp.status_code, 404)
        db = self.factory()
        try:
            self.assertEqual(db.query(Comment).count(), 0)
        finally:
            db.close()

    def test_missing_post(self) -> None:
        self.assertEqual(self.client.get(f"{API}/posts/999").status_code, 404)

    def test_posts_by_user(self) -> None:
        self._create_post("alice", title="A1")
        self._create_post("bob", title="B1")
        self._create_post("alice", title="A2")
        resp = self.client.get(f"{API}/users/{self.ids['alice']}/posts")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual([p["title"] for p in resp.json()["posts"]], ["A2", "A1"])


class TestComments(ApiTestCase):
    def test_anonymous_comment_then_approval(self) -> None:
        post = self._create_post("alice")
        resp = self.client.post(
            f"{API}/posts/{post['id']}/comments",
            json={"author": "Test User", "body": "This is a sample comment", "approved": True},
        )
        self.assertEqual(resp.status_code, 201)
        comment = resp.json()
        self.assertFalse(comment["approved"])

        url = f"{API}/comments/{comment['id']}/approve"
        self.assertEqual(self.client.post(url).status_code, 401)
        self.assertEqual(self.client.post(url, headers=_auth(self.tokens["alice"])).status_code, 403)

        resp = self.client.post(url, headers=_auth(self.tokens["carol"]))
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["approved"])

        listed = self.client.get(f"{API}/posts/{post['id']}/comments").json()["comments"]
        self.assertEqual([c["approved"] for c in listed], [True])

    def test_comment_on_missing_post(self) -> None:
        resp = self.client.post(f"{API}/posts/999/comments", json={"author": "a", "body": "b"})
        self.assertEqual(resp.status_code, 404)

    def test_moderation_is_admin_only(self) -> None:
        post = self._create_post("alice")
        comment = self.client.post(
            f"{API}/posts/{post['id']}/comments", json={"author": "Visitor", "body": "Hi"}
        ).json()
        url = f"{API}/comments/{comment['id']}"

        # The post owner is not a moderator.
        self.assertEqual(
            self.client.patch(url, json={"body": "edited"}, headers=_auth(self.tokens["alice"])).status_code,
            403,
        )
        self.assertEqual(self.client.delete(url, headers=_auth(self.tokens["alice"])).status_code, 403)

        resp = self.client.patch(url, json={"body": "edited"}, headers=_auth(self.tokens["carol"]))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["body"], "edited")
        self.assertFalse(resp.json()["approved"])
        self.assertEqual(self.client.delete(url, headers=_auth(self.tokens["carol"])).status_code, 204)

    def test_unapproved_comments_hidden_from_non_admins(self) -> None:
        post = self._create_post("alice")
        comment = self.client.post(
            f"{API}/posts/{post['id']}/comments", json={"author": "Spammer", "body": "buy now"}
        ).json()
        list_url = f"{API}/posts/{post['id']}/comments"
        comment_url = f"{API}/comments/{comment['id']}"

        self.assertEqual(self.client.get(list_url).json()["comments"], [])
        self.assertEqual(self.client.get(list_url, headers=_auth(self.tokens["alice"])).json()["comments"], [])
        self.assertEqual(self.client.get(comment_url).status_code, 404)
        self.assertEqual(self.client.get(comment_url, headers=_auth(self.tokens["alice"])).status_code, 404)

        queue = self.client.get(list_url, headers=_auth(self.tokens["carol"])).json()["comments"]
        self.assertEqual([c["id"] for c in queue], [comment["id"]])
        resp = self.client.get(comment_url, headers=_auth(self.tokens["carol"]))
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.json()["approved"])

        self.client.post(f"{comment_url}/approve", headers=_auth(self.tokens["carol"]))
        self.assertEqual(self.client.get(comment_url).status_code, 200)
        self.assertEqual(len(self.client.get(list_url).json()["comments"]), 1)


class TestUserManagement(ApiTestCase):
    def test_public_listing(self) -> None:
        resp = self.client.get(f"{API}/users")
        self.assertEqual(resp.status_code, 200)
        users = resp.json()["users"]
        self.assertEqual([u["username"] for u in users], ["alice", "bob", "dave", "carol"])
        self.assertNotIn("email", users[0])

    def test_only_admin_creates_users(self) -> None:
        body = {"username": "erin", "email": "erin@example.com", "password": PASSWORD}
        self.assertEqual(self.client.post(f"{API}/users", json=body).status_code, 401)
        self.assertEqual(
            self.client.post(f"{API}/users", json=body, headers=_auth(self.tokens["alice"])).status_code,
            403,
        )
        resp = self.client.post(f"{API}/users", json=body, headers=_auth(self.tokens["carol"]))
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["email"], "erin@example.com")

        resp = self.client.post(f"{API}/users", json=body, headers=_auth(self.tokens["carol"]))
        self.assertEqual(resp.status_code, 409)

    def test_blank_username_rejected(self) -> None:
        body = {"username": "   ", "email": "blank@example.com", "password": PASSWORD}
        resp = self.client.post(f"{API}/users", json=body, headers=_auth(self.tokens["carol"]))
        self.assertEqual(resp.status_code, 422)

    def test_unknown_role_rejected(self) -> None:
        body = {"username": "erin", "email": "erin@example.com", "password": PASSWORD, "role_id": 999}
        resp = self.client.post(f"{API}/users", json=body, headers=_auth(self.tokens["carol"]))
        self.assertEqual(resp.status_code, 422)

    def test_user_cannot_promote_self(self) -> None:
        resp = self.client.patch(
            f"{API}/users/{self.ids['alice']}",
            json={"role_id": self.admin_role_id},
            headers=_auth(self.tokens["alice"]),
        )
        self.assertEqual(resp.status_code, 403)

    def test_admin_promotes_user(self) -> None:
        resp = self.client.patch(
            f"{API}/users/{self.ids['dave']}",
            json={"role_id": self.admin_role_id},
            headers=_auth(self.tokens["carol"]),
        )
        self.assertEqual(resp.status_code, 200)
        post = self._create_post("alice")
        resp = self.client.delete(f"{API}/posts/{post['id']}", headers=_auth(self.tokens["dave"]))
        self.assertEqual(resp.status_code, 204)

    def test_admin_deletes_user(self) -> None:
        self._create_post("bob")
        url = f"{API}/users/{self.ids['bob']}"
        self.assertEqual(self.client.delete(url, headers=_auth(self.tokens["alice"])).status_code, 403)
        self.assertEqual(self.client.delete(url, headers=_auth(self.tokens["carol"])).status_code, 204)
        self.assertEqual(self.client.get(url).status_code, 404)
        self.assertEqual(self.client.get(f"{API}/posts").json()["posts"], [])


class TestRoleManagement(ApiTestCase):
    def test_roles_hidden_from_non_admins(self) -> None:
        self.assertEqual(self.client.get(f"{API}/roles", headers=_auth(self.tokens["alice"])).status_code, 403)
        resp = self.client.get(f"{API}/roles", headers=_auth(self.tokens["carol"]))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual({r["name"] for r in resp.json()["roles"]}, {"Admin", "Author"})

    def test_create_update_role(self) -> None:
        body = {"name": "Editor"}
        self.assertEqual(
            self.client.post(f"{API}/roles", json=body, headers=_auth(self.tokens["bob"])).status_code, 403
        )
        resp = self.client.post(f"{API}/roles", json=body, headers=_auth(self.tokens["carol"]))
        self.assertEqual(resp.status_code, 201)
        self.assertFalse(resp.json()["admin"])
        role_id = resp.json()["id"]

        resp = self.client.post(f"{API}/roles", json=body, headers=_auth(self.tokens["carol"]))
        self.assertEqual(resp.status_code, 409)

        resp = self.client.patch(
            f"{API}/roles/{role_id}", json={"admin": True}, headers=_auth(self.tokens["carol"])
        )
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["admin"])

    def test_demoting_role_revokes_admin_rights(self) -> None:
        post = self._create_post("alice")
        resp = self.client.patch(
            f"{API}/roles/{self.admin_role_id}", json={"admin": False}, headers=_auth(self.tokens["carol"])
        )
        self.assertEqual(resp.status_code, 200)
        resp = self.client.delete(f"{API}/posts/{post['id']}", headers=_auth(self.tokens["carol"]))
        self.assertEqual(resp.status_code, 403)

    def test_deleting_role_revokes_admin_rights(self) -> None:
        comment_post = self._create_post("alice")
        comment = self.client.post(
            f"{API}/posts/{comment_post['id']}/comments", json={"author": "V", "body": "Hi"}
        ).json()
        resp = self.client.delete(f"{API}/roles/{self.admin_role_id}", headers=_auth(self.tokens["carol"]))
        self.assertEqual(resp.status_code, 204)

        db = self.factory()
        try:
            self.assertIsNone(db.get(Role, self.admin_role_id))
        finally:
            db.close()

        resp = self.client.post(
            f"{API}/comments/{comment['id']}/approve", headers=_auth(self.tokens["carol"])
        )
        self.assertEqual(resp.status_code, 403)

    def test_new_role_does_not_inherit_deleted_role_holders(self) -> None:
        resp = self.client.post(f"{API}/roles", json={"name": "Mods"}, headers=_auth(self.tokens["carol"]))
        mods_id = resp.json()["id"]
        resp = self.client.patch(
            f"{API}/users/{self.ids['bob']}", json={"role_id": mods_id}, headers=_auth(self.tokens["carol"])
        )
        self.assertEqual(resp.status_code, 200)
        resp = self.client.delete(f"{API}/roles/{mods_id}", headers=_auth(self.tokens["carol"]))
        self.assertEqual(resp.status_code, 204)

        resp = self.client.post(
            f"{API}/roles", json={"name": "Editors", "admin": True}, headers=_auth(self.tokens["carol"])
        )
        self.assertEqual(resp.status_code, 201)
        self.assertNotEqual(resp.json()["id"], mods_id)

        db = self.factory()
        try:
            self.assertIsNone(db.get(User, self.ids["bob"]).role_id)
        finally:
            db.close()
        self.assertEqual(self.client.get(f"{API}/roles", headers=_auth(self.tokens["bob"])).status_code, 403)


if __name__ == "__main__":
    unittest.main()
