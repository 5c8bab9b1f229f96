"""Tests for app.services.users.UserDirectory against an in-memory SQLite store."""

import unittest
from unittest.mock import patch

from app.core.security import verify_password
from app.models import RoleName
from app.schemas.user import UserUpdateRequest
from app.services.errors import DuplicateIdentityError, UserNotFoundError
from app.services.users import UserDirectory
from tests.support import add_roles, make_store, registration, user_count


class DirectoryTestCase(unittest.TestCase):
    seed_roles = True

    def setUp(self) -> None:
        self.engine, factory = make_store()
        self.session = factory()
        if self.seed_roles:
            add_roles(self.session)
        self.directory = UserDirectory(self.session)

    def tearDown(self) -> None:
        self.session.close()
        self.engine.dispose()


class TestRegister(DirectoryTestCase):
    def test_new_user_is_enabled_timestamped_and_has_user_role(self) -> None:
        user = self.directory.register(registration(first_name="Alice", last_name="Liddell"))
        self.assertIsNotNone(user.id)
        self.assertTrue(user.enabled)
        self.assertIsNotNone(user.created_at)
        self.assertEqual(user.role_names, frozenset({RoleName.USER}))
        self.assertEqual(user.first_name, "Alice")
        self.assertEqual(user.last_name, "Liddell")

    def test_password_stored_only_as_hash(self) -> None:
        user = self.directory.register(registration(password="pw123456"))
        self.assertNotEqual(user.password_hash, "pw123456")
        self.assertTrue(verify_password("pw123456", user.password_hash))

    def test_duplicate_username_rejected_without_write(self) -> None:
        self.directory.register(registration())
        with self.assertRaises(DuplicateIdentityError) as ctx:
            self.directory.register(registration(email="other@x.com"))
        self.assertEqual(ctx.exception.field, "username")
        self.assertEqual(user_count(self.session), 1)

    def test_username_checked_before_email(self) -> None:
        self.directory.register(registration())
        # Both collide; username wins.
        with self.assertRaises(DuplicateIdentityError) as ctx:
            self.directory.register(registration())
        self.assertEqual(ctx.exception.field, "username")

    def test_duplicate_email_rejected(self) -> None:
        self.directory.register(registration())
        with self.assertRaises(DuplicateIdentityError) as ctx:
            self.directory.register(registration(username="bob"))
        self.assertEqual(ctx.exception.field, "email")
        self.assertIsNone(self.directory.find_by_username("bob"))

    def test_store_constraint_surfaces_as_duplicate_identity(self) -> None:
        """A concurrent registration that passed the existence checks is stopped by the unique index."""
        self.directory.register(registration())
        with patch.object(self.directory, "_ensure_unique"):
            with self.assertRaises(DuplicateIdentityError) as ctx:
                self.directory.register(registration(email="second@x.com"))
        self.assertEqual(ctx.exception.field, "username")
        self.assertEqual(user_count(self.session), 1)

    def test_store_constraint_on_email(self) -> None:
        self.directory.register(registration())
        with patch.object(self.directory, "_ensure_unique"):
            with self.assertRaises(DuplicateIdentityError) as ctx:
                self.directory.register(registration(username="bob"))
        self.assertEqual(ctx.exception.field, "email")


class TestRegisterWithoutUserRole(DirectoryTestCase):
    seed_roles = False

    def test_user_created_with_empty_role_set(self) -> None:
        user = self.directory.register(registration())
        self.assertEqual(user.role_names, frozenset())
        self.assertTrue(user.enabled)


class TestLookups(DirectoryTestCase):
    def test_absent_lookups_return_none(self) -> None:
        self.assertIsNone(self.directory.find_by_username("nobody"))
        self.assertIsNone(self.directory.find_by_id(999))

    def test_find_by_username_and_id(self) -> None:
        user = self.directory.register(registration())
        self.assertEqual(self.directory.find_by_username("alice").id, user.id)
        self.assertEqual(self.directory.find_by_id(user.id).username, "alice")

    def test_list_all_in_id_order(self) -> None:
        self.directory.register(registration())
        self.directory.register(registration(username="bob", email="bob@x.com"))
        self.assertEqual([u.username for u in self.directory.list_all()], ["alice", "bob"])

    def test_list_by_role(self) -> None:
        self.directory.register(registration())
        self.directory.create_user("mod", "mod@x.com", "pw123456", roles=[RoleName.MODERATOR])
        moderators = self.directory.list_by_role(RoleName.MODERATOR)
        self.assertEqual([u.username for u in moderators], ["mod"])

    def test_validate_password(self) -> None:
        user = self.directory.register(registration(password="pw123456"))
        self.assertTrue(self.directory.validate_password("pw123456", user.password_hash))
        self.assertFalse(self.directory.validate_password("pw123457", user.password_hash))


class TestUpdate(DirectoryTestCase):
    def test_missing_user_raises_not_found(self) -> None:
        with self.assertRaises(UserNotFoundError) as ctx:
            self.directory.update(42, UserUpdateRequest(first_name="X"))
        self.assertEqual(ctx.exception.user_id, 42)
        self.assertEqual(user_count(self.session), 0)

    def test_only_names_and_email_change(self) -> None:
        user = self.directory.register(registration(first_name="Alice", last_name="L"))
        before = (user.username, user.password_hash, user.role_names, user.enabled, user.created_at)

        updated = self.directory.update(
            user.id,
            UserUpdateRequest(first_name="Alicia", last_name="Smith", email="alicia@x.com"),
        )

        self.assertEqual(updated.first_name, "Alicia")
        self.assertEqual(updated.last_name, "Smith")
        self.assertEqual(updated.email, "alicia@x.com")
        after = (updated.username, updated.password_hash, updated.role_names, updated.enabled, updated.created_at)
        self.assertEqual(after, before)

    def test_fields_not_sent_are_kept(self) -> None:
        user = self.directory.register(registration(first_name="Alice", last_name="L"))
        updated = self.directory.update(user.id, UserUpdateRequest(last_name="Smith"))
        self.assertEqual(updated.first_name, "Alice")
        self.assertEqual(updated.last_name, "Smith")
        self.assertEqual(updated.email, "alice@x.com")

    def test_explicit_null_clears_name(self) -> None:
        user = self.directory.register(registration(first_name="Alice"))
        updated = self.directory.update(user.id, UserUpdateRequest(first_name=None))
        self.assertIsNone(updated.first_name)

    def test_email_taken_by_other_user_rejected(self) -> None:
        self.directory.register(registration())
        bob = self.directory.register(registration(username="bob", email="bob@x.com"))
        with self.assertRaises(DuplicateIdentityError) as ctx:
            self.directory.update(bob.id, UserUpdateRequest(email="alice@x.com"))
        self.assertEqual(ctx.exception.field, "email")
        self.assertEqual(self.directory.find_by_id(bob.id).email, "bob@x.com")

    def test_keeping_own_email_is_allowed(self) -> None:
        user = self.directory.register(registration())
        updated = self.directory.update(user.id, UserUpdateRequest(email="alice@x.com", first_name="A"))
        self.assertEqual(updated.email, "alice@x.com")


class TestDelete(DirectoryTestCase):
    def test_delete_removes_user(self) -> None:
        user = self.directory.register(registration())
        self.directory.delete(user.id)
        self.assertIsNone(self.directory.find_by_id(user.id))
        self.assertEqual(user_count(self.session), 0)

    def test_delete_missing_id_is_not_an_error(self) -> None:
        self.directory.delete(12345)
        self.assertEqual(user_count(self.session), 0)

    def test_delete_keeps_shared_roles(self) -> None:
        user = self.directory.register(registration())
        self.directory.delete(user.id)
        bob = self.directory.register(registration(username="bob", email="bob@x.com"))
        self.assertEqual(bob.role_names, frozenset({RoleName.USER}))


if __name__ == "__main__":
    unittest.main()
