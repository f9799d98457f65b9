from __future__ import annotations

import logging
from typing import Iterable, Optional

from coffee_radar.collectors.coffeedesk_page import wait_for_loader_to_detach

DEFAULT_MAX_PRICE = "80"

PRODUCER_FILTER_SELECTOR = ".filter-multi-select-manufacturer"
SORTING_FILTER_SELECTOR = ".filter-multi-select-sorting"
SORT_PRICE_ASC_LABEL = "Cena (rosnąco)"
MORE_FILTERS_LABEL = "Więcej filtrów"
MORE_FILTERS_CONTAINER_SELECTOR = ".more-filters-container"
PRICE_FILTER_LABEL = "Cena"
MAX_PRICE_INPUT_SELECTOR = ".form-control.max-input"
FILTER_PANEL_SELECTOR = ".filter-panel-items-container"
FLAVOUR_FILTER_LABEL = "Nuty smakowe"

PRODUCER_LIST = (
    "3FE",
    "BONANZA COFFEE",
    "BRACIA ZIÓŁKOWSCY",
    "CASINO MOCCA",
    "COFFEE PLANT",
    "COFFEELAB",
    "DAK COFFEE ROASTERS",
    "DOUBLESHOT",
    "FATHER'S COFFEE",
    "FIGA COFFEE",
    "FIVE ELEPHANT",
    "GARDELLI SPECIALITY COFFEES",
    "GOOD COFFEE",
    "HARD BEANS",
    "HAYB",
    "HERESY",
    "KAFAR",
    "KYOTO",
    "LA CABRA",
    "LYKKE",
    "MAMAM",
    "NOMAD COFFEE",
    "ONYX COFFEE LAB",
    "ROCKET BEAN",
    "SPOJKA",
    "STORY COFFEE ROASTERS",
    "THE COFFEE COLLECTIVE",
)

FLAVOURS = (
    "owoce cytrusowe",
    "owoce czerwone",
    "owoce leśne",
    "owoce suszone",
    "owoce tropikalne",
    "owoce żółte",
    "przyprawy",
    "słodkie",
)

logger = logging.getLogger(__name__)


async def select_from_multi_select_filter(filter_container, options: Iterable[str]) -> list[str]:
    """
    Open a multi-select dropdown and tick every enabled entry found in `options`.

    Entries outside the allowlist and disabled entries are left alone. Clicking
    a label toggles it, so calling this twice on the same dropdown deselects.
    """
    wanted = set(options)
    selected: list[str] = []

    await filter_container.click()
    for option in await filter_container.locator("li").all():
        text = ((await option.text_content()) or "").strip()
        if text not in wanted:
            continue
        if await option.locator("input").get_attribute("disabled") is not None:
            continue
        await option.locator("label").click()
        selected.append(text)
    return selected


async def filter_by_producers(page) -> list[str]:
    producer_dropdown = page.locator(PRODUCER_FILTER_SELECTOR)
    selected = await select_from_multi_select_filter(producer_dropdown, PRODUCER_LIST)
    logger.info("Selected %s producer(s)", len(selected))
    return selected


async def sort_by_price(page) -> None:
    sorting_dropdown = page.locator(SORTING_FILTER_SELECTOR)
    await sorting_dropdown.click()
    await sorting_dropdown.get_by_text(SORT_PRICE_ASC_LABEL).click()


async def open_more_filters(page) -> None:
    await page.get_by_text(MORE_FILTERS_LABEL).click()


async def set_max_price(page, max_price: str = DEFAULT_MAX_PRICE) -> Optional[int]:
    """
    Open the price control in the "more filters" panel and fill its max bound.

    The label "Cena" also matches "Ocena min", so both controls come back.
    The first one in document order is clicked; if the panel is reordered the
    wrong control gets opened. Returns the index of the clicked match, or None
    when nothing matched.
    """
    matches = await page.locator(MORE_FILTERS_CONTAINER_SELECTOR).get_by_text(PRICE_FILTER_LABEL).all()
    chosen: Optional[int] = None
    if matches:
        if len(matches) > 1:
            logger.debug("%s controls match %r; using the first", len(matches), PRICE_FILTER_LABEL)
        await matches[0].click()
        chosen = 0
    await page.locator(MAX_PRICE_INPUT_SELECTOR).fill(max_price)
    return chosen


async def set_flavours(page) -> list[str]:
    flavours_dropdown = page.locator(FILTER_PANEL_SELECTOR).get_by_text(FLAVOUR_FILTER_LABEL)
    selected = await select_from_multi_select_filter(flavours_dropdown, FLAVOURS)
    logger.info("Selected %s flavour note(s)", len(selected))
    return selected


async def apply_filters(page, max_price: str = DEFAULT_MAX_PRICE) -> None:
    await filter_by_producers(page)
    await wait_for_loader_to_detach(page)
    await sort_by_price(page)
    await wait_for_loader_to_detach(page)
    await open_more_filters(page)
    await set_max_price(page, max_price)
    await wait_for_loader_to_detach(page)
    await set_flavours(page)
    await wait_for_loader_to_detach(page)
    logger.info("Filters applied (max price %s)", max_price)
