from __future__ import annotations

"""Session façade
-----------------
Selenium IDE-like commands over a single WebDriver: every element operation
takes a locator string ("id=q", ".btn", "css=li:eq(2)", "//a") or a
WebElement. Use it as a context manager so the browser is always quit.

    with Session() as s:
        s.open("https://example.com")
        s.send_keys("name=q", "recplay")
        s.click("css=button[type=submit]")
"""

import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from rich.console import Console
from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.common.alert import Alert
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement

from recplay.capture.screenshot import CaptureResult, ScreenshotManager
from recplay.core.browser import create_driver
from recplay.core.tracing import format_call, traced
from recplay.drawing import DrawingMixin
from recplay.selectors.locator import parse_locator
from recplay.selectors.strategy import locate, locate_all, query_all
from recplay.utils.config import Settings, get_settings
from recplay.utils.logger import get_logger
from recplay.utils.timing import poll, wait_until

ElementRef = Union[str, WebElement]


class Session(DrawingMixin):
    """Owns one WebDriver for its lifetime."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        driver: Optional[WebDriver] = None,
        console: Optional[Console] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.console = console or Console(highlight=False)
        self.log = get_logger(__name__)
        self.screens = ScreenshotManager(self.settings.screenshot_dir)
        self.driver: WebDriver = driver if driver is not None else create_driver(self.settings)
        self._closed = False
        self._timeout = self.settings.TIMEOUT
        try:
            self._apply_timeouts(self._timeout)
        except BaseException:
            # an injected driver belongs to the caller
            if driver is None:
                self._quit_quietly()
            raise

    # ---------- Lifecycle ----------

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc is None:
            self.quit()
            return
        try:
            self.quit()
        except Exception as quit_err:
            self.log.warning(f"quit failed while handling {exc_type.__name__}: {quit_err!r}")

    def _quit_quietly(self) -> None:
        try:
            self.quit()
        except Exception as quit_err:
            self.log.warning(f"quit failed after a failed start: {quit_err!r}")

    def _apply_timeouts(self, seconds: float) -> None:
        self.driver.implicitly_wait(seconds)
        self.driver.set_page_load_timeout(seconds)
        self.driver.set_script_timeout(seconds)

    # ---------- Attributes ----------

    @property
    def browser(self) -> str:
        return self.settings.BROWSER.value

    @property
    def locale(self) -> str:
        return self.settings.LOCALE

    @property
    def headless(self) -> bool:
        return self.settings.HEADLESS

    @property
    def verbose(self) -> bool:
        return self.settings.VERBOSE

    @property
    def silent(self) -> bool:
        return self.settings.SILENT

    @property
    def log_prefix(self) -> str:
        return self.settings.LOG_PREFIX

    @property
    def screen_dir(self) -> Path:
        return self.screens.screen_dir

    @property
    def timeout(self) -> float:
        return self._timeout

    @timeout.setter
    def timeout(self, seconds: float) -> None:
        self._apply_timeouts(seconds)
        self._timeout = seconds

    # ---------- Output ----------

    def describe(self, description: str) -> None:
        """Print a step description (suppressed when silent)."""
        self._emit(description.rstrip("\r\n"))

    def _emit(self, line: str) -> None:
        if not self.silent:
            self.console.print(f"{self.log_prefix}{line}", markup=False, highlight=False)

    def _trace_call(self, name: str, args: tuple, kwargs: dict) -> None:
        if not self.verbose:
            return
        line = format_call(name, args, kwargs)
        self.log.debug(f"call {line}")
        self._emit(line)

    # ---------- Waiting ----------

    def _poll_interval(self) -> float:
        return self.settings.POLL_INTERVAL

    @traced
    def wait_for(self, condition: Callable[[], Any], seconds: Optional[float] = None) -> Any:
        """Wait until `condition()` is truthy and return its value (WaitTimeoutError otherwise)."""
        return wait_until(
            condition,
            self.timeout if seconds is None else seconds,
            self._poll_interval(),
        )

    @traced
    def element_found(self, locator: str, seconds: float = 1) -> bool:
        """True if the element shows up (displayed) within `seconds`."""
        loc = parse_locator(locator)
        self.implicit_wait(seconds)
        try:
            result = poll(
                lambda: locate(self.driver, loc).is_displayed(),
                seconds,
                self._poll_interval(),
                description=f"{locator} found",
            )
            return result.satisfied
        finally:
            self.implicit_wait(self.timeout)

    @traced
    def wait_for_enabled(self, locator: ElementRef) -> bool:
        return self.wait_for(lambda: self.find_element(locator).is_enabled())

    @traced
    def wait_for_visible(self, locator: ElementRef) -> bool:
        return self.wait_for(lambda: self.find_element(locator).is_displayed())

    @traced
    def wait_for_not_visible(self, locator: str, seconds: float = 3) -> bool:
        """
        Wait up to `seconds` for every match of `locator` to be hidden or
        gone. Always returns True.
        """
        loc = parse_locator(locator)
        self.implicit_wait(seconds)
        try:
            result = poll(
                lambda: not any(e.is_displayed() for e in query_all(self.driver, loc)),
                seconds,
                self._poll_interval(),
                description=f"{locator} not visible",
            )
            # Waiting for absence: running out the clock counts as done.
            if result.timed_out:
                self.log.debug(f"{locator} still visible after {seconds}s")
            return True
        finally:
            self.implicit_wait(self.timeout)

    @traced
    def wait_for_title(self, string: str) -> bool:
        return self.wait_for(lambda: string.lower() in (self.driver.title or "").lower())

    @traced
    def wait_for_url(self, url: str) -> bool:
        return self.wait_for(lambda: url in self.driver.current_url)

    @traced
    def wait_for_attribute_to_include(self, locator: str, attribute: str, value: str) -> bool:
        """Case-insensitive; stale elements are re-queried."""
        loc = parse_locator(locator)

        def _includes() -> bool:
            actual = locate(self.driver, loc).get_attribute(attribute)
            return actual is not None and value.lower() in actual.lower()

        return self.wait_for(_includes)

    @traced
    def wait_for_text_to_include(self, locator: ElementRef, string: str) -> bool:
        return self.wait_for(lambda: string in self.text(locator))

    @traced
    def wait_for_text_to_exclude(self, locator: ElementRef, string: str) -> bool:
        return self.wait_for(lambda: string not in self.text(locator))

    @traced
    def switch_to_frame_and_wait_for_element_found(self, frame_id: Any, locator: str) -> WebElement:
        self.switch_to_frame(frame_id)
        loc = parse_locator(locator)
        return self.wait_for(lambda: locate(self.driver, loc))

    # ---------- Lookup ----------

    @traced
    def find_element(self, locator: ElementRef) -> WebElement:
        """
        First match of `locator`, or match N for "css=...:eq(N)", once it is
        displayed. Raises InvalidLocatorError, NotFoundError or
        WaitTimeoutError.
        """
        if isinstance(locator, WebElement):
            return locator
        element = locate(self.driver, locator)
        wait_until(
            element.is_displayed,
            self.timeout,
            self._poll_interval(),
            description=f"{locator} displayed",
        )
        return element

    @traced
    def find_elements(self, locator: str) -> List[WebElement]:
        return locate_all(self.driver, locator)

    # ---------- Driver ----------

    @traced
    def action(self) -> ActionChains:
        return ActionChains(self.driver)

    @traced
    def active_element(self) -> WebElement:
        return self.driver.switch_to.active_element

    @traced
    def add_cookie(self, cookie: Dict[str, Any]) -> None:
        """`cookie` takes name, value and optionally path, domain, secure, expiry."""
        self.driver.add_cookie(cookie)

    @traced
    def cookie_named(self, name: str) -> Optional[Dict[str, Any]]:
        return self.driver.get_cookie(name)

    @traced
    def delete_cookie(self, name: str) -> None:
        self.driver.delete_cookie(name)

    @traced
    def delete_all_cookies(self) -> None:
        self.driver.delete_all_cookies()

    @traced
    def switch_to_alert(self) -> Alert:
        return self.driver.switch_to.alert

    @traced
    def alert_accept(self) -> None:
        self.switch_to_alert().accept()

    @traced
    def alert_dismiss(self) -> None:
        self.switch_to_alert().dismiss()

    @traced
    def alert_send_keys(self, keys: str) -> None:
        self.switch_to_alert().send_keys(keys)

    @traced
    def open(self, url: str) -> None:
        self.driver.get(url)

    @traced
    def blank(self) -> None:
        self.open("about:blank")

    @traced
    def back(self) -> None:
        self.driver.back()

    @traced
    def forward(self) -> None:
        self.driver.forward()

    @traced
    def refresh(self) -> None:
        self.driver.refresh()

    @traced
    def close(self) -> None:
        """Close the current window (the browser too if it was the last one)."""
        self.driver.close()

    @traced
    def quit(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.driver.quit()

    @traced
    def current_url(self) -> str:
        return self.driver.current_url

    @traced
    def title(self) -> str:
        return self.driver.title

    @traced
    def page_source(self) -> str:
        return self.driver.page_source

    @traced
    def execute_script(self, script: str, *args: Any) -> Any:
        """Run `script`; `args` are available to it as `arguments[i]`."""
        return self.driver.execute_script(script, *args)

    @traced
    def full_screen(self) -> None:
        self.driver.fullscreen_window()

    @traced
    def maximize(self) -> None:
        if not self.headless:
            self.driver.maximize_window()

    @traced
    def maximize_to_screen(self) -> None:
        size = self.execute_script(
            "return { width: window.screen.width, height: window.screen.height };"
        )
        self.move_window_to(0, 0)
        self.resize_window_to(size["width"], size["height"])

    @traced
    def minimize(self) -> None:
        self.driver.minimize_window()

    @traced
    def move_window_to(self, point_x: int, point_y: int) -> None:
        self.driver.set_window_position(point_x, point_y)

    @traced
    def resize_window_to(self, width: int, height: int) -> None:
        self.driver.set_window_size(width, height)

    @traced
    def new_tab(self) -> str:
        """Open a tab and return its window handle."""
        self.execute_script("window.open();")
        return self.window_handles()[-1]

    @traced
    def new_window(self, name: str) -> None:
        self.execute_script(
            """
            var w = Math.max(document.documentElement.clientWidth, window.innerWidth || 0);
            var h = Math.max(document.documentElement.clientHeight, window.innerHeight || 0);
            window.open("about:blank", arguments[0], "width=" + w + ",height=" + h);
            """,
            name,
        )

    @traced
    def window_handle(self) -> str:
        return self.driver.current_window_handle

    @traced
    def window_handles(self) -> List[str]:
        return self.driver.window_handles

    @traced
    def switch_to_window(self, handle: str) -> None:
        self.driver.switch_to.window(handle)

    @traced
    def switch_to_frame(self, frame_id: Any) -> None:
        self.driver.switch_to.frame(frame_id)

    @traced
    def switch_to_parent_frame(self) -> None:
        self.driver.switch_to.parent_frame()

    @traced
    def switch_to_default_content(self) -> None:
        self.driver.switch_to.default_content()

    @traced
    def save_screenshot(self, filename: str) -> CaptureResult:
        """Save a PNG under <SCREEN_DIR>/<LOCALE>/; ".png" is appended when missing."""
        return self.screens.save(self.driver, filename)

    @traced
    def zoom(self, scale: float) -> None:
        self.execute_script("document.body.style.zoom = arguments[0];", scale)

    @traced
    def implicit_wait(self, seconds: float) -> None:
        self.driver.implicitly_wait(seconds)

    @traced
    def page_load(self, seconds: float) -> None:
        self.driver.set_page_load_timeout(seconds)

    @traced
    def script_timeout(self, seconds: float) -> None:
        self.driver.set_script_timeout(seconds)

    @traced
    def mkdir(self, path: Union[str, os.PathLike]) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    # ---------- Elements ----------

    @traced
    def attribute(self, locator: ElementRef, name: str) -> Optional[str]:
        return self.find_element(locator).get_attribute(name)

    @traced
    def has_attribute(self, locator: ElementRef, name: str) -> bool:
        return bool(self.execute_script(
            "return arguments[0].hasAttribute(arguments[1]);",
            self.find_element(locator),
            name,
        ))

    @traced
    def set_attribute(self, locator: ElementRef, name: str, value: str) -> None:
        self.execute_script(
            "arguments[0].setAttribute(arguments[1], arguments[2]);",
            self.find_element(locator),
            name,
            value,
        )

    @traced
    def remove_attribute(self, locator: ElementRef, name: str) -> None:
        self.execute_script(
            """
            var element = arguments[0];
            if (element.hasAttribute(arguments[1])) {
              element.removeAttribute(arguments[1]);
            }
            """,
            self.find_element(locator),
            name,
        )

    @traced
    def css_value(self, locator: ElementRef, prop: str) -> str:
        return self.find_element(locator).value_of_css_property(prop)

    @traced
    def is_displayed(self, locator: ElementRef) -> bool:
        return self.find_element(locator).is_displayed()

    @traced
    def is_enabled(self, locator: ElementRef) -> bool:
        return self.find_element(locator).is_enabled()

    @traced
    def is_selected(self, locator: ElementRef) -> bool:
        return self.find_element(locator).is_selected()

    @traced
    def location(self, locator: ElementRef) -> Dict[str, int]:
        return self.find_element(locator).location

    @traced
    def rect(self, locator: ElementRef) -> Dict[str, float]:
        return self.find_element(locator).rect

    @traced
    def size(self, locator: ElementRef) -> Dict[str, int]:
        return self.find_element(locator).size

    @traced
    def tag_name(self, locator: ElementRef) -> str:
        return self.find_element(locator).tag_name

    @traced
    def text(self, locator: ElementRef) -> str:
        return self.find_element(locator).text

    @traced
    def clear(self, locator: ElementRef) -> None:
        self.find_element(locator).clear()

    @traced
    def click(self, locator: ElementRef) -> None:
        """Click once the element is enabled and nothing intercepts the click."""
        def _click() -> bool:
            element = self.find_element(locator)
            if not element.is_enabled():
                return False
            element.click()
            return True

        self.wait_for(_click)

    @traced
    def js_click(self, locator: ElementRef) -> None:
        self.execute_script("arguments[0].click();", self.find_element(locator))

    @traced
    def click_at(self, locator: ElementRef, x: int = 0, y: int = 0) -> None:
        """Click at an offset from the element's center."""
        element = self.find_element(locator)
        self.action().move_to_element_with_offset(element, x, y).click().perform()

    @traced
    def double_click(self, locator: ElementRef, x: int = 0, y: int = 0) -> None:
        element = self.find_element(locator)
        self.action().move_to_element_with_offset(element, x, y).double_click().perform()

    @traced
    def right_click(self, locator: ElementRef, x: int = 0, y: int = 0) -> None:
        element = self.find_element(locator)
        self.action().move_to_element_with_offset(element, x, y).context_click().perform()

    @traced
    def move_to(self, locator: ElementRef, x: int = 0, y: int = 0) -> None:
        element = self.find_element(locator)
        self.action().move_to_element_with_offset(element, x, y).perform()

    @traced
    def move_by(self, right_by: int = 0, down_by: int = 0) -> None:
        self.action().move_by_offset(right_by, down_by).perform()

    @traced
    def drag_and_drop(self, from_locator: ElementRef, to_locator: ElementRef) -> None:
        source = self.find_element(from_locator)
        target = self.find_element(to_locator)
        self.action().drag_and_drop(source, target).perform()

    @traced
    def drag_and_drop_by(self, locator: ElementRef, x: int = 0, y: int = 0) -> None:
        element = self.find_element(locator)
        self.action().drag_and_drop_by_offset(element, x, y).perform()

    @traced
    def send_keys(self, locator: ElementRef, *keys: str) -> None:
        self.find_element(locator).send_keys(*keys)

    @traced
    def select(self, option_locator: ElementRef) -> None:
        """Select an OPTION by clicking it."""
        self.find_element(option_locator).click()

    @traced
    def submit(self, locator: ElementRef) -> None:
        self.find_element(locator).submit()

    @traced
    def blur(self, locator: ElementRef) -> None:
        self.execute_script("arguments[0].blur();", self.find_element(locator))

    @traced
    def focus(self, locator: ElementRef) -> None:
        self.execute_script("arguments[0].focus();", self.find_element(locator))

    @traced
    def hide(self, locator: ElementRef) -> None:
        self.execute_script("arguments[0].style.display = 'none';", self.find_element(locator))

    @traced
    def show(self, locator: ElementRef) -> None:
        self.execute_script("arguments[0].style.display = '';", self.find_element(locator))

    @traced
    def highlight(self, locator: ElementRef, color: str = "#ff3") -> None:
        self.execute_script(
            "arguments[0].style.backgroundColor = arguments[1];",
            self.find_element(locator),
            color,
        )

    @traced
    def scroll_into_view(self, locator: ElementRef, align_to: bool = True) -> None:
        """`align_to` True aligns the element to the top of the view, False to the bottom."""
        self.execute_script(
            "arguments[0].scrollIntoView(arguments[1]);",
            self.find_element(locator),
            align_to,
        )

    @traced
    def trigger(self, locator: ElementRef, event: str) -> None:
        """Dispatch a non-bubbling, non-cancelable DOM event."""
        self.execute_script(
            """
            var event = new Event(arguments[1], {"bubbles": false, "cancelable": false});
            arguments[0].dispatchEvent(event);
            """,
            self.find_element(locator),
            event,
        )
