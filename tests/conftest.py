"""Shared fixtures – in-memory SQLite, no external database required."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fieldcrypt.services.transformer import FieldEncryptionConfig

SECRET = "letsdothis"
ENCRYPTED_1 = "b27d5768b82263ece8bd"  # "some stuff"
ENCRYPTED_2 = "b27a5578f43537fbebfb2e365ab13977"  # "should be hidden"


@pytest.fixture
def config():
    return FieldEncryptionConfig(fields=("toEncrypt1", "toEncrypt2"), secret=SECRET)


@pytest.fixture
def plain_document():
    return {"toEncrypt1": "some stuff", "toEncrypt2": "should be hidden"}


@pytest.fixture
def encrypted_document():
    return {
        "toEncrypt1": ENCRYPTED_1,
        "__enc_toEncrypt1": True,
        "toEncrypt2": ENCRYPTED_2,
        "__enc_toEncrypt2": True,
    }


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)
