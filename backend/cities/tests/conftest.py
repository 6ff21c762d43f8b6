import pytest

from cities.logic.catalog import CityCatalog
from cities.logic.settings import GameSettings
from cities.logic.types import Player
from cities.session.manager import SessionManager
from cities.tests.mocks import MockTransport

TEST_CITIES = [
    "Москва",
    "Астана",
    "Анапа",
    "Абакан",
    "Адлер",
    "Архангельск",
    "Казань",
    "Киров",
    "Курск",
    "Нальчик",
    "Новгород",
    "Дубай",
    "Йошкар-Ола",
    "Рязань",
    "Волгоград",
    "Томск",
]


@pytest.fixture
def catalog():
    return CityCatalog(TEST_CITIES)


@pytest.fixture
def settings():
    """Short timers so join and inactivity expiry can be observed in tests."""
    return GameSettings(
        win_score=3,
        join_seconds=0.05,
        progress_interval_seconds=0.01,
        inactivity_seconds=0.2,
    )


@pytest.fixture
def transport():
    return MockTransport()


@pytest.fixture
async def manager(catalog, transport, settings):
    manager = SessionManager(catalog, transport, settings=settings)
    yield manager
    await manager.shutdown()


@pytest.fixture
def alice():
    return Player(user_id="1", name="Alice")


@pytest.fixture
def bob():
    return Player(user_id="2", name="Bob")
