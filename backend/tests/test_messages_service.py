from __future__ import annotations

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from contact_api.core.errors import NotFound, PersistenceError, ValidationError
from contact_api.crud import contact_message as crud
from contact_api.models.contact_message import ContactMessage
from contact_api.schemas.contact import ContactCreate
from contact_api.services import messages as message_service


def _count(db) -> int:
    return db.execute(select(func.count()).select_from(ContactMessage)).scalar_one()


def _submit(db, **fields) -> ContactMessage:
    return message_service.submit_message(db, ContactCreate(**fields))


def test_submit_stores_active_message(db):
    cm = _submit(db, name="Alice", phone="555-1234", message="Hello")

    assert cm.id is not None
    assert cm.deleted is False
    assert cm.deleted_at is None
    assert cm.created_at is not None

    active = message_service.list_active(db)
    assert [m.id for m in active] == [cm.id]


def test_submit_strips_whitespace(db):
    cm = _submit(db, name="  Alice ", phone=" 555 ", subject="", message=" Hi there ")

    assert cm.name == "Alice"
    assert cm.phone == "555"
    assert cm.subject is None
    assert cm.message == "Hi there"


@pytest.mark.parametrize(
    "fields, missing",
    [
        ({"message": "Hello"}, ["name"]),
        ({"name": "Alice"}, ["message"]),
        ({"name": "   ", "message": "Hello"}, ["name"]),
        ({}, ["name", "message"]),
    ],
)
def test_submit_requires_name_and_message(db, fields, missing):
    with pytest.raises(ValidationError) as excinfo:
        _submit(db, **fields)

    assert excinfo.value.fields == missing
    assert _count(db) == 0


def test_submit_honours_extra_required_fields(db):
    with pytest.raises(ValidationError) as excinfo:
        message_service.submit_message(
            db,
            ContactCreate(name="Alice", message="Hello"),
            required_fields=["name", "phone", "message"],
        )

    assert excinfo.value.fields == ["phone"]
    assert _count(db) == 0


def test_list_active_is_newest_first_and_capped(db):
    first = _submit(db, name="Bob", message="first")
    second = _submit(db, name="Alice", phone="555-1234", message="Hello")

    active = message_service.list_active(db)
    assert [m.id for m in active] == [second.id, first.id]
    assert active[0].name == "Alice"

    assert [m.id for m in message_service.list_active(db, limit=1)] == [second.id]


def test_soft_delete_moves_message_to_trash(db):
    keep = _submit(db, name="Keep", message="stay")
    gone = _submit(db, name="Gone", message="bye")

    deleted = message_service.soft_delete(db, gone.id)

    assert deleted.deleted is True
    assert deleted.deleted_at is not None
    assert [m.id for m in message_service.list_active(db)] == [keep.id]
    assert [m.id for m in message_service.list_deleted(db)] == [gone.id]


def test_list_deleted_orders_by_deletion_time(db):
    a = _submit(db, name="A", message="a")
    b = _submit(db, name="B", message="b")

    message_service.soft_delete(db, b.id)
    message_service.soft_delete(db, a.id)

    assert [m.id for m in message_service.list_deleted(db)] == [a.id, b.id]


def test_soft_delete_twice_keeps_original_timestamp(db):
    cm = _submit(db, name="Alice", message="Hello")

    first = message_service.soft_delete(db, cm.id).deleted_at
    second = message_service.soft_delete(db, cm.id).deleted_at

    assert second == first


def test_soft_delete_twice_can_refresh_timestamp(db):
    cm = _submit(db, name="Alice", message="Hello")

    first = message_service.soft_delete(db, cm.id).deleted_at
    again = message_service.soft_delete(db, cm.id, refresh_timestamp=True)

    assert again.deleted is True
    assert again.deleted_at >= first


def test_restore_clears_deleted_at(db):
    cm = _submit(db, name="Alice", message="Hello")
    message_service.soft_delete(db, cm.id)

    restored = message_service.restore(db, cm.id)

    assert restored.deleted is False
    assert restored.deleted_at is None
    assert [m.id for m in message_service.list_active(db)] == [cm.id]
    assert message_service.list_deleted(db) == []


def test_deleted_at_tracks_deleted_flag(db):
    cm = _submit(db, name="Alice", message="Hello")
    for step in (message_service.soft_delete, message_service.restore, message_service.soft_delete):
        step(db, cm.id)
        row = crud.get_contact_message(db, message_id=cm.id)
        assert (row.deleted_at is not None) == row.deleted


@pytest.mark.parametrize("operation", [message_service.soft_delete, message_service.restore])
def test_unknown_id_is_not_found_and_changes_nothing(db, operation):
    cm = _submit(db, name="Alice", message="Hello")

    with pytest.raises(NotFound):
        operation(db, cm.id + 100)

    row = crud.get_contact_message(db, message_id=cm.id)
    assert row.deleted is False
    assert row.deleted_at is None
    assert _count(db) == 1


def test_purge_only_removes_trashed_messages(db):
    cm = _submit(db, name="Alice", message="Hello")

    with pytest.raises(NotFound):
        message_service.purge(db, cm.id)

    message_service.soft_delete(db, cm.id)
    message_service.purge(db, cm.id)

    assert _count(db) == 0
    with pytest.raises(NotFound):
        message_service.purge(db, cm.id)


def test_database_failure_becomes_persistence_error(db, monkeypatch):
    def _boom(*args, **kwargs):
        raise OperationalError("INSERT", {}, Exception("database is locked"))

    monkeypatch.setattr(crud, "create_contact_message", _boom)

    with pytest.raises(PersistenceError) as excinfo:
        _submit(db, name="Alice", message="Hello")

    assert excinfo.value.status_code == 500
    assert "locked" not in excinfo.value.detail
