from __future__ import annotations

"""Screenshot utilities
----------------------
Saves PNG screenshots under the session's screen directory with sanitized
file names and reports what was captured.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Tuple

from PIL import Image
from selenium.webdriver.remote.webdriver import WebDriver

from recplay.utils.logger import get_logger
from recplay.utils.timing import measure

INVALID_FILENAME_CHARS = ("/", "\\", "?", "%", "*", ":", "|", '"', "<", ">")


def sanitize(filename: str) -> str:
    for ch in INVALID_FILENAME_CHARS:
        filename = filename.replace(ch, "")
    return filename


@dataclass
class CaptureResult:
    path: Path
    width: int
    height: int
    url: str
    title: str
    ts: str              # ISO timestamp


class ScreenshotManager:
    """Writes PNG screenshots into `screen_dir`, creating it on demand."""

    def __init__(self, screen_dir: Path):
        self.screen_dir = Path(screen_dir)
        self.log = get_logger(__name__)

    def path_for(self, filename: str) -> Path:
        name = filename if filename.endswith(".png") else f"{filename}.png"
        return self.screen_dir / sanitize(name)

    @measure("save_screenshot")
    def save(self, driver: WebDriver, filename: str) -> CaptureResult:
        out_path = self.path_for(filename)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        if not driver.save_screenshot(str(out_path)):
            raise OSError(f"Driver could not write screenshot to {out_path}")

        w, h = self._image_size(out_path)
        self.log.debug(f"Saved screenshot {out_path} ({w}x{h})")
        return CaptureResult(
            path=out_path,
            width=w,
            height=h,
            url=driver.current_url,
            title=driver.title or "",
            ts=datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        )

    @staticmethod
    def _image_size(path: Path) -> Tuple[int, int]:
        with Image.open(path) as im:
            return im.width, im.height
