"""
Shared pytest fixtures.

Every fixture writes under pytest's tmp_path, so tests never touch the real
data directory.
"""

import pytest
from fastapi.testclient import TestClient

from spark.app import create_app
from spark.config import Settings
from spark.models import Emotion
from spark.services.context import ContextService
from spark.services.entries import EntryStore
from spark.services.events import ChangeNotifier
from spark.services.persistence import EntryPersistence
from spark.services.preferences import EmotionPreferenceStore



class CountingPersistence(EntryPersistence):
    """EntryPersistence that records how many times save() ran."""

    def __init__(self, path: str):
        super().__init__(path)
        self.save_calls = 0

    async def save(self, entries):
        self.save_calls += 1
        return await super().save(entries)


@pytest.fixture()
def storage_path(tmp_path):
    return tmp_path / "sparkEntries.json"


@pytest.fixture()
def persistence(storage_path):
    return CountingPersistence(str(storage_path))


@pytest.fixture()
def notifier():
    return ChangeNotifier()


@pytest.fixture()
def store(persistence, notifier):
    return EntryStore(persistence, notifier)


@pytest.fixture()
def preferences(tmp_path):
    return EmotionPreferenceStore(str(tmp_path / "preferences.json"), default=Emotion.HAPPY)


@pytest.fixture()
def context_service(preferences):
    return ContextService(preferences)


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        STORAGE_PATH=str(tmp_path / "api" / "sparkEntries.json"),
        PREFERENCES_PATH=str(tmp_path / "api" / "preferences.json"),
    )


@pytest.fixture()
def client(settings):
    with TestClient(create_app(settings)) as c:
        yield c
