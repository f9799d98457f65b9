from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Optional

DEFAULT_OUTPUT_PATH = "hrefs.txt"

# Product slugs that pass every filter but are never wanted.
EXCLUDED_HREF_PATTERNS = ("Sie-Przelewa", "Coffee-Plant-Flow-")
_EXCLUDED_HREF_RES = [re.compile(pattern) for pattern in EXCLUDED_HREF_PATTERNS]

logger = logging.getLogger(__name__)


def is_excluded(href: Optional[str]) -> bool:
    return any(rx.search(href or "") for rx in _EXCLUDED_HREF_RES)


def filter_excluded_hrefs(hrefs: Iterable[Optional[str]]) -> list[Optional[str]]:
    return [href for href in hrefs if not is_excluded(href)]


def format_hrefs(hrefs: Iterable[Optional[str]]) -> str:
    return "\n".join("null" if href is None else href for href in hrefs)


def write_hrefs(hrefs: Iterable[Optional[str]], path: str | Path = DEFAULT_OUTPUT_PATH) -> list[Optional[str]]:
    kept = filter_excluded_hrefs(hrefs)
    out_path = Path(path)
    out_path.write_text(format_hrefs(kept), encoding="utf-8")
    logger.info("Wrote %s href(s) to %s", len(kept), out_path)
    return kept
