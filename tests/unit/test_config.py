from pathlib import Path

import pytest
from pydantic import ValidationError

from recplay.utils.config import BrowserName, Settings


@pytest.mark.parametrize(
    "browser, raw, expected",
    [
        ("chrome", "en_us", "en-US"),
        ("chrome", "pt-br", "pt-BR"),
        ("firefox", "en_US", "en-us"),
        ("safari", "de", "de"),
    ],
)
def test_locale_normalization(browser, raw, expected):
    assert Settings(BROWSER=browser, LOCALE=raw).LOCALE == expected


def test_window_size():
    s = Settings(WINDOW_SIZE=" 1024 , 768 ")
    assert s.WINDOW_SIZE == "1024,768"
    assert s.window_dimensions == (1024, 768)
    with pytest.raises(ValidationError):
        Settings(WINDOW_SIZE="big")


def test_paths_are_absolute_and_screens_grouped_by_locale():
    s = Settings(SCREEN_DIR="shots", LOCALE="fr")
    assert s.SCREEN_DIR == Path.cwd() / "shots"
    assert s.screenshot_dir == Path.cwd() / "shots" / "fr"


def test_env_prefix(monkeypatch):
    monkeypatch.setenv("RECPLAY_BROWSER", "firefox")
    monkeypatch.setenv("RECPLAY_TIMEOUT", "7")
    monkeypatch.setenv("RECPLAY_AUTH_USERNAME", "alice")
    s = Settings()
    assert s.BROWSER == BrowserName.firefox
    assert s.TIMEOUT == 7
    assert s.has_auth


def test_invalid_browser():
    with pytest.raises(ValidationError):
        Settings(BROWSER="netscape")
