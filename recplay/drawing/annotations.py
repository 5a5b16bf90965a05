from __future__ import annotations

"""Overlay annotations
----------------------
Draws arrows, marks, tooltips and text over the page (for annotated
screenshots). Each drawing is a node with an id starting with "recplay_" and
is returned as a WebElement.
"""

import random
import string

from selenium.webdriver.remote.webelement import WebElement

from recplay.core.tracing import traced
from recplay.drawing import scripts

_ID_CHARSET = string.digits + string.ascii_lowercase


def random_id(length: int = 8) -> str:
    return scripts.ID_PREFIX + "".join(random.choices(_ID_CHARSET, k=length))


class DrawingMixin:
    """
    Overlay operations for Session. Relies on the host's `execute_script`,
    `find_element` and `rect`.
    """

    @traced
    def clear_drawings(self) -> None:
        """Remove every overlay and reset the flyover counter."""
        self.execute_script(scripts.CLEAR_DRAWINGS, scripts.ID_PREFIX)

    @traced
    def draw_arrow(self, from_locator, to_locator) -> WebElement:
        """Draw a red arrow from one element to another."""
        node_id = random_id()
        self.execute_script(
            scripts.DRAW_ARROW,
            self.find_element(from_locator),
            self.find_element(to_locator),
            node_id,
        )
        return self.find_element(f"id={node_id}")

    @traced
    def draw_color_fill(self, locator, color: str = "rgba(255,0,0,0.8)") -> WebElement:
        """Cover the element with a box of `color` (any CSS background color)."""
        r = self.rect(locator)
        node_id = random_id()
        self.execute_script(
            scripts.DRAW_COLOR_FILL,
            node_id, color, r["x"], r["y"], r["width"], r["height"],
        )
        return self.find_element(f"id={node_id}")

    @traced
    def draw_flyover(
        self,
        locator,
        attribute: str = "title",
        offset_x: int = 5,
        offset_y: int = 15,
        from_last_pos: bool = False,
        draw_symbol: bool = False,
    ) -> WebElement:
        """
        Draw a tooltip showing the element's `attribute`.

        With `draw_symbol` the tooltip and a marker next to the element are
        numbered (①, ②, ...). With `from_last_pos` the tooltip is stacked
        under the previous one instead of placed by the element.
        """
        symbol_id = random_id()
        tooltip_id = random_id()
        self.execute_script(
            scripts.DRAW_FLYOVER,
            self.find_element(locator),
            attribute,
            offset_x,
            offset_y,
            bool(from_last_pos),
            bool(draw_symbol),
            symbol_id,
            tooltip_id,
        )
        return self.find_element(f"id={tooltip_id}")

    @traced
    def draw_redmark(self, locator, top: int = 5, right: int = 5, bottom: int = 5, left: int = 5) -> WebElement:
        """Draw a red border around the element, padded on each side."""
        r = self.rect(locator)
        node_id = random_id()
        self.execute_script(
            scripts.DRAW_REDMARK,
            node_id, r["x"], r["y"], r["width"], r["height"],
            top, right, bottom, left,
        )
        return self.find_element(f"id={node_id}")

    @traced
    def draw_select(self, locator, offset_x: int = 0, offset_y: int = 0) -> WebElement:
        """Render the enabled options of a SELECT as an open dropdown."""
        node_id = random_id()
        self.execute_script(scripts.DRAW_SELECT, self.find_element(locator), node_id, offset_x, offset_y)
        return self.find_element(f"id={node_id}")

    @traced
    def draw_text(
        self,
        locator,
        text: str,
        color: str = "#f00",
        font_size: int = 13,
        top: int = 2,
        right: int = 20,
    ) -> WebElement:
        """Write `text` just below the element."""
        r = self.rect(locator)
        node_id = random_id()
        self.execute_script(
            scripts.DRAW_TEXT,
            node_id, text, color, font_size,
            r["x"], r["y"], r["height"], top, right,
        )
        return self.find_element(f"id={node_id}")
