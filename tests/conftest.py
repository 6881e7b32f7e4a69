import pytest
from unittest.mock import MagicMock
from zoneinfo import ZoneInfo
from fastapi.testclient import TestClient

from spa_booking.core.config import settings
from spa_booking.main import app
from spa_booking.models.booking_models import BookingRequest
from spa_booking.services.booking_service import BookingStore
from spa_booking.services.notification_service import TelegramNotifier
from spa_booking.services.storage_service import JsonFileRepository

UTC = ZoneInfo("UTC")


def booking_payload(**overrides):
    payload = {
        "service": "Massage",
        "duration": "60min",
        "price": 100,
        "gender": "F",
        "phone": "555",
        "datetime": "2024-01-01T10:00:00Z",
    }
    payload.update(overrides)
    return payload


def booking_request(**overrides) -> BookingRequest:
    return BookingRequest.model_validate(booking_payload(**overrides))


@pytest.fixture
def notifier():
    mock = MagicMock(spec=TelegramNotifier)
    mock.send_booking_alert.return_value = True
    mock.send_cancellation_alert.return_value = True
    return mock


@pytest.fixture
def bookings_path(tmp_path):
    return str(tmp_path / "bookings.json")


@pytest.fixture
def store(bookings_path, notifier):
    return BookingStore(JsonFileRepository(bookings_path), notifier, UTC)


@pytest.fixture
def client(tmp_path, monkeypatch):
    # Fresh files per test and no Telegram credentials, so nothing leaves the machine
    monkeypatch.setattr(settings, "BOOKINGS_FILE", str(tmp_path / "bookings.json"))
    monkeypatch.setattr(settings, "TESTIMONIALS_FILE", str(tmp_path / "testimonials.json"))
    monkeypatch.setattr(settings, "TELEGRAM_BOT_TOKEN", "")
    monkeypatch.setattr(settings, "TELEGRAM_CHAT_ID", "")
    with TestClient(app) as test_client:
        yield test_client
