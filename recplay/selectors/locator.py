from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from selenium.webdriver.common.by import By

from recplay.selectors.errors import InvalidLocatorError


class Strategy(str, Enum):
    """Element finder strategies accepted in locator strings."""
    class_ = "class"
    class_name = "class name"
    css = "css"
    id = "id"
    link = "link"
    link_text = "link text"
    name = "name"
    partial_link_text = "partial link text"
    tag_name = "tag name"
    xpath = "xpath"

    @property
    def by(self) -> str:
        return _BY[self]


_BY = {
    Strategy.class_: By.CLASS_NAME,
    Strategy.class_name: By.CLASS_NAME,
    Strategy.css: By.CSS_SELECTOR,
    Strategy.id: By.ID,
    Strategy.link: By.LINK_TEXT,
    Strategy.link_text: By.LINK_TEXT,
    Strategy.name: By.NAME,
    Strategy.partial_link_text: By.PARTIAL_LINK_TEXT,
    Strategy.tag_name: By.TAG_NAME,
    Strategy.xpath: By.XPATH,
}

# key: alphabetic words joined by "_" or a single space ("link_text", "link text")
_PREFIX_RE = re.compile(r"^([A-Za-z]+(?:[_ ][A-Za-z]+)*)=(.+)$", re.DOTALL)
_NTH_RE = re.compile(r"^(.+):eq\((\d+)\)$", re.DOTALL)

_CSS_LEADS = (".", "#", "[")
_XPATH_LEADS = ("/", "(")


@dataclass(frozen=True)
class Locator:
    strategy: Strategy
    selector: str
    raw: str = ""

    @property
    def by(self) -> str:
        return self.strategy.by

    def as_tuple(self) -> Tuple[str, str]:
        """(By, value) pair, the shape selenium's find_element takes."""
        return self.by, self.selector

    def __str__(self) -> str:
        return self.raw or f"{self.strategy.value}={self.selector}"


def _lookup_strategy(key: str) -> Optional[Strategy]:
    try:
        return Strategy(key.replace("_", " "))
    except ValueError:
        return None


def _infer_strategy(selector: str) -> Optional[Strategy]:
    if selector.startswith(_CSS_LEADS):
        return Strategy.css
    if selector.startswith(_XPATH_LEADS):
        return Strategy.xpath
    return None


def parse_locator(locator: str) -> Locator:
    """
    Resolve a locator string into a (strategy, selector) pair.

    - "id=login", "css=.btn", "link_text=Home"  -> explicit strategy
    - ".btn", "#main", "[data-x]"               -> css
    - "//a[@href='x=y']", "(//li)[2]"           -> xpath

    An explicit prefix always wins; structural inference only applies to
    unprefixed input. Anything else raises InvalidLocatorError.
    """
    if not isinstance(locator, str) or not locator.strip():
        raise InvalidLocatorError(str(locator), "empty locator")

    m = _PREFIX_RE.match(locator)
    if m:
        key, selector = m.group(1), m.group(2)
        strategy = _lookup_strategy(key)
        if strategy is None:
            raise InvalidLocatorError(locator, f"unknown strategy {key!r}")
        return Locator(strategy=strategy, selector=selector, raw=locator)

    strategy = _infer_strategy(locator)
    if strategy is None:
        raise InvalidLocatorError(locator, "no strategy prefix and not css or xpath")
    return Locator(strategy=strategy, selector=locator, raw=locator)


def split_nth(selector: str) -> Tuple[str, Optional[int]]:
    """
    Split a trailing ":eq(N)" off a CSS selector.

        split_nth("li.item:eq(2)") -> ("li.item", 2)
        split_nth("li.item")       -> ("li.item", None)
    """
    m = _NTH_RE.match(selector)
    if not m:
        return selector, None
    return m.group(1), int(m.group(2))
