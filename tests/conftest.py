from __future__ import annotations

import io
from pathlib import Path
from typing import Dict, List, Tuple

import pytest
from PIL import Image
from rich.console import Console
from selenium.common.exceptions import NoSuchElementException

from recplay.utils.config import Settings


class FakeElement:
    def __init__(self, name: str = "el", text: str = "", displayed: bool = True, enabled: bool = True,
                 rect: Dict[str, float] | None = None, attrs: Dict[str, str] | None = None):
        self.name = name
        self.text = text
        self.displayed = displayed
        self.enabled = enabled
        self.rect = rect or {"x": 10, "y": 20, "width": 100, "height": 30}
        self.attrs = attrs or {}
        self.clicks = 0
        self.keys: List[str] = []
        self.tag_name = "div"

    def is_displayed(self) -> bool:
        return self.displayed

    def is_enabled(self) -> bool:
        return self.enabled

    def is_selected(self) -> bool:
        return False

    def get_attribute(self, name: str):
        return self.attrs.get(name)

    def click(self) -> None:
        self.clicks += 1

    def send_keys(self, *keys: str) -> None:
        self.keys.extend(keys)

    def clear(self) -> None:
        self.keys.clear()

    def __repr__(self) -> str:
        return f"<FakeElement {self.name}>"


class FakeSwitchTo:
    def __init__(self, driver: "FakeDriver"):
        self.driver = driver

    def frame(self, frame_id) -> None:
        self.driver.frames.append(frame_id)

    def parent_frame(self) -> None:
        self.driver.frames.append("..")

    def default_content(self) -> None:
        self.driver.frames.clear()

    def window(self, handle) -> None:
        self.driver.frames.append(("window", handle))


class FakeDriver:
    """In-memory stand-in for a selenium WebDriver."""

    def __init__(self, elements: Dict[Tuple[str, str], List[FakeElement]] | None = None):
        self.elements = elements or {}
        self.scripts: List[Tuple[str, tuple]] = []
        self.implicit_waits: List[float] = []
        self.page_load_timeouts: List[float] = []
        self.script_timeouts: List[float] = []
        self.visited: List[str] = []
        self.frames: list = []
        self.quit_calls = 0
        self.find_element_calls = 0
        self.title = "Example Domain"
        self.current_url = "about:blank"
        self.switch_to = FakeSwitchTo(self)
        self.screenshot_size = (40, 30)

    def find_elements(self, by: str, value: str) -> List[FakeElement]:
        if by == "id" and value.startswith("recplay_"):
            return [FakeElement(value)]
        return list(self.elements.get((by, value), []))

    def find_element(self, by: str, value: str) -> FakeElement:
        self.find_element_calls += 1
        found = self.find_elements(by, value)
        if not found:
            raise NoSuchElementException(f"{by}={value}")
        return found[0]

    def execute_script(self, script: str, *args):
        self.scripts.append((script, args))
        return None

    def implicitly_wait(self, seconds: float) -> None:
        self.implicit_waits.append(seconds)

    def set_page_load_timeout(self, seconds: float) -> None:
        self.page_load_timeouts.append(seconds)

    def set_script_timeout(self, seconds: float) -> None:
        self.script_timeouts.append(seconds)

    def get(self, url: str) -> None:
        self.visited.append(url)
        self.current_url = url

    def save_screenshot(self, filename: str) -> bool:
        Image.new("RGB", self.screenshot_size, "white").save(filename, format="PNG")
        return True

    def quit(self) -> None:
        self.quit_calls += 1


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        TIMEOUT=1,
        POLL_INTERVAL=0.01,
        SCREEN_DIR=tmp_path / "screens",
        RUNS_DIR=tmp_path / "runs",
        SCRIPTS_DIR=tmp_path / "scripts",
    )


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver({
        ("id", "go"): [FakeElement("go")],
        ("name", "q"): [FakeElement("q")],
        ("css selector", "li"): [FakeElement("li0", "one"), FakeElement("li1", "two"), FakeElement("li2", "three")],
    })


@pytest.fixture
def console_buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def console(console_buffer: io.StringIO) -> Console:
    return Console(file=console_buffer, width=200, color_system=None, highlight=False)


@pytest.fixture
def make_element():
    return FakeElement


@pytest.fixture
def make_driver():
    return FakeDriver
