from __future__ import annotations

"""Browser factory
------------------
Turns Settings into a Selenium driver. Only construction lives here; the
driver binaries themselves are resolved by Selenium Manager.
"""

from selenium import webdriver
from selenium.webdriver.remote.webdriver import WebDriver

from recplay.core.auth_extension import build_basic_auth_extension
from recplay.utils.config import BrowserName, Settings, get_settings
from recplay.utils.logger import get_logger

log = get_logger(__name__)


def chrome_options(settings: Settings) -> webdriver.ChromeOptions:
    options = webdriver.ChromeOptions()
    options.add_argument("--disable-notifications")
    options.add_argument("--ignore-ssl-errors=yes")
    options.add_argument("--ignore-certificate-errors")

    if settings.HEADLESS:
        options.add_argument("--headless")
        options.add_argument(f"--window-size={settings.WINDOW_SIZE}")

    if settings.has_auth:
        if settings.HEADLESS:
            log.warning("Basic access authentication extension cannot be installed while headless")
        else:
            options.add_encoded_extension(
                build_basic_auth_extension(settings.AUTH_USERNAME, settings.AUTH_PASSWORD)
            )

    options.add_experimental_option("excludeSwitches", ["enable-automation", "enable-logging"])
    options.add_experimental_option("prefs", {"intl.accept_languages": settings.LOCALE})
    return options


def firefox_options(settings: Settings) -> webdriver.FirefoxOptions:
    options = webdriver.FirefoxOptions()
    options.set_preference("intl.accept_languages", settings.LOCALE)
    if settings.HEADLESS:
        options.add_argument("-headless")
    return options


def ie_options(settings: Settings) -> webdriver.IeOptions:
    options = webdriver.IeOptions()
    options.ensure_clean_session = True
    options.full_page_screenshot = True
    options.ignore_protected_mode_settings = True
    options.ignore_zoom_level = True
    options.native_events = False
    return options


def create_driver(settings: Settings | None = None) -> WebDriver:
    s = settings or get_settings()
    log.debug(f"Starting {s.BROWSER.value} (locale={s.LOCALE}, headless={s.HEADLESS})")

    if s.BROWSER == BrowserName.chrome:
        return webdriver.Chrome(options=chrome_options(s))
    if s.BROWSER == BrowserName.firefox:
        return webdriver.Firefox(options=firefox_options(s))
    if s.BROWSER == BrowserName.ie:
        return webdriver.Ie(options=ie_options(s))
    return webdriver.Safari()
