import pytest

from recplay.capture import ScreenshotManager, sanitize


def test_sanitize_strips_reserved_characters():
    assert sanitize('a/b\\c?d%e*f:g|h"i<j>k.png') == "abcdefghijk.png"


def test_path_for_appends_extension(tmp_path):
    mgr = ScreenshotManager(tmp_path)
    assert mgr.path_for("home") == tmp_path / "home.png"
    assert mgr.path_for("home.png") == tmp_path / "home.png"


def test_save_creates_directory_and_reads_size(tmp_path, driver):
    driver.current_url = "https://example.com/"
    mgr = ScreenshotManager(tmp_path / "screens" / "en")
    res = mgr.save(driver, "landing")
    assert res.path.exists()
    assert (res.width, res.height) == (40, 30)
    assert res.url == "https://example.com/"
    assert res.title == "Example Domain"


def test_save_failure_raises(tmp_path, driver):
    driver.save_screenshot = lambda filename: False
    with pytest.raises(OSError):
        ScreenshotManager(tmp_path).save(driver, "nope")
