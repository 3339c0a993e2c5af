import pytest

from todo_tracker import crud
from todo_tracker.errors import AuthError, ConflictError, NotFoundError, ValidationError
from todo_tracker.security import hash_password, verify_password


@pytest.fixture
def alice(db):
    return crud.register_user(db, "alice", "a@x.com", "secret1", rounds=4)


@pytest.fixture
def bob(db):
    return crud.register_user(db, "bob", "b@x.com", "secret2", rounds=4)


class TestPasswords:
    def test_hash_is_salted(self):
        first = hash_password("secret1", rounds=4)
        second = hash_password("secret1", rounds=4)
        assert first != second
        assert verify_password("secret1", first)
        assert verify_password("secret1", second)

    def test_wrong_password(self):
        assert not verify_password("nope", hash_password("secret1", rounds=4))

    def test_garbage_hash(self):
        assert not verify_password("secret1", "not-a-bcrypt-hash")


class TestCredentialStore:
    def test_register_stores_hash_only(self, db, alice):
        assert alice.id is not None
        assert alice.password_hash != "secret1"
        assert alice.created_at is not None

    def test_find_by_email(self, db, alice):
        assert crud.get_user_by_email(db, "a@x.com").id == alice.id
        assert crud.get_user_by_email(db, "missing@x.com") is None

    def test_duplicate_username(self, db, alice):
        with pytest.raises(ConflictError):
            crud.register_user(db, "alice", "other@x.com", "pw", rounds=4)

    def test_duplicate_email(self, db, alice):
        with pytest.raises(ConflictError):
            crud.register_user(db, "alice2", "a@x.com", "pw", rounds=4)

    def test_session_usable_after_conflict(self, db, alice):
        with pytest.raises(ConflictError):
            crud.register_user(db, "alice", "other@x.com", "pw", rounds=4)
        assert crud.register_user(db, "carol", "c@x.com", "pw", rounds=4).id != alice.id

    @pytest.mark.parametrize("username, email, password", [
        (None, "e@x.com", "pw"),
        ("u", None, "pw"),
        ("u", "e@x.com", None),
        ("u", "e@x.com", ""),
    ])
    def test_missing_fields(self, db, username, email, password):
        with pytest.raises(ValidationError):
            crud.register_user(db, username, email, password, rounds=4)

    def test_authenticate(self, db, alice):
        assert crud.authenticate(db, "a@x.com", "secret1").id == alice.id
        with pytest.raises(AuthError):
            crud.authenticate(db, "a@x.com", "wrong")
        with pytest.raises(AuthError):
            crud.authenticate(db, "nobody@x.com", "secret1")


class TestTodoStore:
    def test_create_defaults(self, db, alice):
        todo = crud.create_todo(db, alice.id, "Buy milk")
        assert todo.description == ""
        assert todo.completed is False
        assert todo.user_id == alice.id
        assert todo.created_at is not None
        assert todo.updated_at is not None

    def test_create_blank_title(self, db, alice):
        with pytest.raises(ValidationError):
            crud.create_todo(db, alice.id, "   ", "desc")

    def test_list_is_scoped_and_newest_first(self, db, alice, bob):
        crud.create_todo(db, alice.id, "first")
        crud.create_todo(db, bob.id, "bob's")
        crud.create_todo(db, alice.id, "second")
        assert [t.title for t in crud.list_todos(db, alice.id)] == ["second", "first"]
        assert [t.title for t in crud.list_todos(db, bob.id)] == ["bob's"]

    def test_update_overwrites_everything(self, db, alice):
        todo = crud.create_todo(db, alice.id, "t", "d")
        updated = crud.update_todo(db, todo.id, alice.id, "t2", None, None)
        assert updated.title == "t2"
        assert updated.description is None
        assert updated.completed is False

    def test_toggle(self, db, alice):
        todo = crud.create_todo(db, alice.id, "t")
        assert crud.toggle_todo(db, todo.id, alice.id).completed is True
        assert crud.toggle_todo(db, todo.id, alice.id).completed is False

    def test_delete(self, db, alice):
        todo_id = crud.create_todo(db, alice.id, "t").id
        crud.delete_todo(db, todo_id, alice.id)
        assert crud.list_todos(db, alice.id) == []
        with pytest.raises(NotFoundError):
            crud.delete_todo(db, todo_id, alice.id)

    @pytest.mark.parametrize("todo_id", [crud.MAX_ID + 1, -crud.MAX_ID - 2])
    def test_out_of_range_id_is_not_found(self, db, alice, todo_id):
        with pytest.raises(NotFoundError):
            crud.get_todo(db, todo_id, alice.id)
        with pytest.raises(NotFoundError):
            crud.delete_todo(db, todo_id, alice.id)

    def test_other_owner_sees_not_found(self, db, alice, bob):
        todo = crud.create_todo(db, alice.id, "private")
        with pytest.raises(NotFoundError):
            crud.get_todo(db, todo.id, bob.id)
        with pytest.raises(NotFoundError):
            crud.update_todo(db, todo.id, bob.id, "mine now", None, True)
        with pytest.raises(NotFoundError):
            crud.toggle_todo(db, todo.id, bob.id)
        with pytest.raises(NotFoundError):
            crud.delete_todo(db, todo.id, bob.id)

        still_there = crud.get_todo(db, todo.id, alice.id)
        assert still_there.title == "private"
        assert still_there.completed is False
