import pytest

from heater_reminder.config import settings
from heater_reminder.errors import InputValidationError
from heater_reminder.services import messaging


@pytest.mark.parametrize(
    "phone, expected",
    [
        ("081234567890", "6281234567890"),
        ("6281234567890", "6281234567890"),
        ("+62 812-3456-7890", "6281234567890"),
        ("(0812) 3456 7890", "6281234567890"),
        ("81234567890", "6281234567890"),
    ],
)
def test_normalize_phone(phone, expected):
    assert messaging.normalize_phone(phone) == expected


@pytest.mark.parametrize("phone", ["", "   ", "n/a"])
def test_normalize_phone_rejects_numbers_without_digits(phone):
    with pytest.raises(InputValidationError):
        messaging.normalize_phone(phone)


def test_build_message_url(monkeypatch):
    monkeypatch.setattr(settings, "messaging_base_url", "https://wa.me/")

    assert messaging.build_message_url("081234567890") == "https://wa.me/6281234567890"


def test_open_message_link_uses_browser(monkeypatch):
    opened = []
    monkeypatch.setattr(settings, "open_links", True)
    monkeypatch.setattr(settings, "messaging_base_url", "https://wa.me")
    monkeypatch.setattr(messaging.webbrowser, "open", lambda url, new=0: opened.append((url, new)) or True)

    url = messaging.open_message_link("0811 2233")

    assert url == "https://wa.me/628112233"
    assert opened == [("https://wa.me/628112233", 2)]


def test_open_message_link_can_skip_browser(monkeypatch):
    monkeypatch.setattr(settings, "open_links", False)
    monkeypatch.setattr(messaging.webbrowser, "open", lambda *args, **kwargs: pytest.fail("browser opened"))

    assert messaging.open_message_link("0811").endswith("/62811")
