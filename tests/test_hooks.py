"""Tests for the SQLAlchemy persistence hooks – in-memory SQLite."""

import pytest
from sqlalchemy import JSON, Column, Integer, event, select, update
from sqlalchemy.orm import DeclarativeBase

from fieldcrypt.errors import UnsupportedFieldType
from fieldcrypt.models.hooks import (
    get_field_encryption,
    register_field_encryption,
    unregister_field_encryption,
)
from fieldcrypt.services.transformer import FieldEncryptionConfig

ENCRYPTED_1 = "b27d5768b82263ece8bd"
ENCRYPTED_2 = "b27a5578f43537fbebfb2e365ab13977"


class Base(DeclarativeBase):
    pass


class Record(Base):
    __tablename__ = "records"

    id = Column(Integer, primary_key=True)
    body = Column(JSON, nullable=False)


@pytest.fixture
def session(engine, session_factory, config):
    Base.metadata.create_all(bind=engine)
    register_field_encryption(Record, config)
    db = session_factory()
    yield db
    db.close()
    unregister_field_encryption(Record)


def _stored_body(db, record_id):
    """Read the raw JSON column, bypassing ORM load hooks."""
    return db.execute(select(Record.__table__.c.body).where(Record.__table__.c.id == record_id)).scalar_one()


def test_encrypt_on_save_and_decrypt_on_load(session, session_factory, plain_document):
    record = Record(body=plain_document)
    session.add(record)
    session.flush()

    assert record.body["__enc_toEncrypt1"] is True
    assert record.body["toEncrypt1"] == ENCRYPTED_1
    assert record.body["__enc_toEncrypt2"] is True
    assert record.body["toEncrypt2"] == ENCRYPTED_2

    session.commit()
    record_id = record.id

    stored = _stored_body(session, record_id)
    assert stored["toEncrypt1"] == ENCRYPTED_1
    assert stored["toEncrypt2"] == ENCRYPTED_2

    other = session_factory()
    try:
        found = other.get(Record, record_id)
        assert found.body == {
            "toEncrypt1": "some stuff",
            "__enc_toEncrypt1": False,
            "toEncrypt2": "should be hidden",
            "__enc_toEncrypt2": False,
        }
    finally:
        other.close()


def test_refresh_after_commit_decrypts(session, plain_document):
    record = Record(body=plain_document)
    session.add(record)
    session.commit()

    # expired on commit; attribute access reloads through the refresh hook
    assert record.body["toEncrypt1"] == "some stuff"
    assert record.body["__enc_toEncrypt1"] is False


def test_update_reencrypts(session, session_factory, plain_document):
    record = Record(body=plain_document)
    session.add(record)
    session.commit()

    record.body = {**record.body, "toEncrypt1": "new value"}
    session.commit()

    stored = _stored_body(session, record.id)
    assert stored["toEncrypt1"] != "new value"
    assert stored["toEncrypt2"] == ENCRYPTED_2
    assert record.body["toEncrypt1"] == "new value"


def test_plaintext_update_outside_orm_is_not_decrypted(session, session_factory, plain_document):
    record = Record(body=plain_document)
    session.add(record)
    session.commit()
    record_id = record.id

    session.execute(
        update(Record.__table__)
        .where(Record.__table__.c.id == record_id)
        .values(
            body={
                "toEncrypt1": "snoop",
                "__enc_toEncrypt1": False,
                "toEncrypt2": ENCRYPTED_2,
                "__enc_toEncrypt2": True,
            }
        )
    )
    session.commit()

    other = session_factory()
    try:
        found = other.get(Record, record_id)
        assert found.body["__enc_toEncrypt1"] is False
        assert found.body["toEncrypt1"] == "snoop"
        assert found.body["__enc_toEncrypt2"] is False
        assert found.body["toEncrypt2"] == "should be hidden"
    finally:
        other.close()


def test_non_string_field_aborts_save(session):
    session.add(Record(body={"toEncrypt1": {"nested": "some stuff"}, "toEncrypt2": "x"}))

    with pytest.raises(UnsupportedFieldType):
        session.commit()
    session.rollback()

    assert session.execute(select(Record.__table__.c.id)).all() == []


def test_register_replaces_previous_hooks(session, config):
    hooks = register_field_encryption(Record, config)
    assert get_field_encryption(Record) is config
    assert event.contains(Record, "before_insert", hooks.before_persist)

    unregister_field_encryption(Record)
    assert get_field_encryption(Record) is None
    assert not event.contains(Record, "before_insert", hooks.before_persist)


def test_unregistered_model_stores_plaintext(session, plain_document):
    unregister_field_encryption(Record)
    record = Record(body=plain_document)
    session.add(record)
    session.commit()

    assert _stored_body(session, record.id) == {
        "toEncrypt1": "some stuff",
        "toEncrypt2": "should be hidden",
    }
