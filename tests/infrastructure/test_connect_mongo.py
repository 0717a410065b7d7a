"""Startup Connection — ping on connect, fatal StorageConnectionError on failure."""

from unittest.mock import MagicMock

import pytest
from pymongo.errors import ServerSelectionTimeoutError

from health_monitor.config import Settings
from health_monitor.core.errors import StorageConnectionError
from health_monitor.infrastructure import database


@pytest.fixture
def fake_client(monkeypatch):
    client = MagicMock()
    factory = MagicMock(return_value=client)
    monkeypatch.setattr(database, "MongoClient", factory)
    return factory, client


def test_connect_pings_server(fake_client):
    factory, client = fake_client
    settings = Settings(mongodb_uri="mongodb://db:27017")

    assert database.connect_mongo(settings) is client

    factory.assert_called_once_with(
        "mongodb://db:27017", serverSelectionTimeoutMS=5000,
    )
    client.admin.command.assert_called_once_with("ping")


def test_connect_failure_is_fatal(fake_client):
    _, client = fake_client
    client.admin.command.side_effect = ServerSelectionTimeoutError("timeout")

    with pytest.raises(StorageConnectionError):
        database.connect_mongo(Settings(mongodb_uri="mongodb://db:27017"))

    client.close.assert_called_once()
