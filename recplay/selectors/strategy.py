from __future__ import annotations

from typing import List, Union

from selenium.common.exceptions import NoSuchElementException
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement

from recplay.selectors.errors import NotFoundError, NthMatchOutOfRange
from recplay.selectors.locator import Locator, Strategy, parse_locator, split_nth
from recplay.utils.logger import get_logger

log = get_logger(__name__)

LocatorLike = Union[str, Locator]


def _as_locator(locator: LocatorLike) -> Locator:
    return locator if isinstance(locator, Locator) else parse_locator(locator)


def query_all(driver: WebDriver, locator: LocatorLike) -> List[WebElement]:
    """Multi-element query; an empty list is a valid answer here.

    "css=...:eq(N)" narrows the result to match N, or to nothing.
    """
    loc = _as_locator(locator)
    if loc.strategy == Strategy.css:
        base, nth = split_nth(loc.selector)
        if nth is not None:
            matches = driver.find_elements(loc.by, base)
            return matches[nth:nth + 1]
    return driver.find_elements(loc.by, loc.selector)


def locate_all(driver: WebDriver, locator: LocatorLike) -> List[WebElement]:
    """Multi-element query that raises NotFoundError when nothing matches."""
    loc = _as_locator(locator)
    elements = query_all(driver, loc)
    if not elements:
        raise NotFoundError(str(loc), f"Failed to find elements: {loc}")
    return elements


def locate(driver: WebDriver, locator: LocatorLike) -> WebElement:
    """
    Single-element query.

    A CSS selector ending in ":eq(N)" runs the multi-element query for the
    base selector and returns match N (0-based) of the ordered result.
    """
    loc = _as_locator(locator)

    if loc.strategy == Strategy.css:
        base, nth = split_nth(loc.selector)
        if nth is not None:
            matches = driver.find_elements(loc.by, base)
            if nth >= len(matches):
                raise NthMatchOutOfRange(str(loc), nth, len(matches))
            log.debug(f"{loc} -> match {nth} of {len(matches)}")
            return matches[nth]

    try:
        return driver.find_element(loc.by, loc.selector)
    except NoSuchElementException as exc:
        raise NotFoundError(str(loc)) from exc
