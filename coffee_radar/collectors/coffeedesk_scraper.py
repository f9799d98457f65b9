from __future__ import annotations

import asyncio
import logging
import os
from datetime import date
from typing import Awaitable, Iterable, Optional

from playwright.async_api import Error as PlaywrightError, async_playwright

from coffee_radar.collectors.base import CatalogScan, FreshnessCheck, PageScan
from coffee_radar.collectors.coffeedesk_filters import DEFAULT_MAX_PRICE, apply_filters
from coffee_radar.collectors.coffeedesk_page import (
    DEFAULT_START_URL,
    open_catalog,
    wait_for_loader_to_detach,
)
from coffee_radar.normalization.roast_date import freshness_cutoff, is_fresh_roast, parse_roast_date

DEFAULT_RUN_TIMEOUT_SECONDS = 5 * 60
# 0 disables Playwright's per-action timeout; the run deadline bounds everything.
DEFAULT_ACTION_TIMEOUT_MS = 0

PRODUCT_SELECTOR = ".product-box"
UNAVAILABLE_SELECTOR = ".product-detail-not-available"
ROAST_DATE_SELECTOR = ".product-box__roasting-data"
PRODUCT_LINK_SELECTOR = ".product-info a"
NEXT_PAGE_SELECTOR = ".page-next"

logger = logging.getLogger(__name__)


async def gather_in_order(coros: Iterable[Awaitable]) -> list:
    """
    Await all coroutines concurrently and return their results in input order.

    If one fails the rest are cancelled and drained before the error propagates,
    so nothing keeps touching a page that is about to be closed.
    """
    tasks = [asyncio.ensure_future(coro) for coro in coros]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def get_all_coffees(page) -> list:
    return await page.locator(PRODUCT_SELECTOR).all()


async def product_is_available(product) -> bool:
    return not await product.locator(UNAVAILABLE_SELECTOR).is_visible()


async def check_roast_freshness(product, today: Optional[date] = None) -> FreshnessCheck:
    """
    Classify one listed coffee by its roast date label.

    Never raises: a hidden, empty or malformed label, or any browser error
    while reading it, yields an undetermined check with `fresh=False`.
    """
    today = today or date.today()
    roast_date_loc = product.locator(ROAST_DATE_SELECTOR)
    try:
        if not await roast_date_loc.is_visible():
            return FreshnessCheck.undetermined("roast date not visible")
        roast_date_text = await roast_date_loc.text_content()
        if not roast_date_text:
            return FreshnessCheck.undetermined("roast date empty")
        roast_date = parse_roast_date(roast_date_text)
    except Exception as exc:
        return FreshnessCheck.undetermined(f"{type(exc).__name__}: {exc}")

    if not is_fresh_roast(roast_date, today):
        logger.info("Roasting date too late: %s (cutoff %s)", roast_date, freshness_cutoff(today))
        return FreshnessCheck(fresh=False, roast_date=roast_date)
    return FreshnessCheck(fresh=True, roast_date=roast_date)


async def only_fresh_roast(product, today: Optional[date] = None) -> bool:
    check = await check_roast_freshness(product, today)
    if not check.determined:
        logger.debug("Treating product as not fresh: %s", check.reason)
    return check.fresh


async def get_available_coffees(all_coffees: list) -> list:
    flags = await gather_in_order(product_is_available(coffee) for coffee in all_coffees)
    return [coffee for coffee, is_available in zip(all_coffees, flags) if is_available]


async def get_fresh_coffees(available_coffees: list, today: Optional[date] = None) -> list:
    flags = await gather_in_order(only_fresh_roast(coffee, today) for coffee in available_coffees)
    return [coffee for coffee, is_fresh in zip(available_coffees, flags) if is_fresh]


async def get_product_hrefs(coffees: list) -> list[Optional[str]]:
    return await gather_in_order(
        coffee.locator(PRODUCT_LINK_SELECTOR).get_attribute("href") for coffee in coffees
    )


async def scan_page(page, page_number: int = 1, today: Optional[date] = None) -> PageScan:
    all_coffees = await get_all_coffees(page)
    available_coffees = await get_available_coffees(all_coffees)
    fresh_coffees = await get_fresh_coffees(available_coffees, today)
    fresh_hrefs = await get_product_hrefs(fresh_coffees)
    logger.info(
        "Page %s: %s listed, %s available, %s fresh",
        page_number,
        len(all_coffees),
        len(available_coffees),
        len(fresh_coffees),
    )
    return PageScan(
        page_number=page_number,
        total_count=len(all_coffees),
        available_count=len(available_coffees),
        fresh_hrefs=fresh_hrefs,
    )


async def has_next_page(page) -> bool:
    next_page_btn = page.locator(NEXT_PAGE_SELECTOR)
    try:
        if await next_page_btn.count() == 0:
            return False
        return await next_page_btn.is_enabled()
    except PlaywrightError as exc:
        logger.warning("Next page control unusable (%s); treating as last page.", exc)
        return False


async def go_to_next_page(page) -> None:
    await page.locator(NEXT_PAGE_SELECTOR).click()
    await wait_for_loader_to_detach(page)


async def collect_fresh_hrefs(page, today: Optional[date] = None) -> CatalogScan:
    """
    Walk the filtered listing page by page, collecting fresh in-stock hrefs.

    Stops after the first page that lists an unavailable product (the listing
    is sorted by price, so the rest is out of stock too) or when the next-page
    control is missing or disabled.
    """
    scan = CatalogScan()
    page_number = 1
    while True:
        page_scan = await scan_page(page, page_number, today)
        scan.pages.append(page_scan)

        if page_scan.has_unavailable:
            logger.info("Unavailable products on page %s; stopping pagination.", page_number)
            break
        if not await has_next_page(page):
            logger.info("No next page after page %s; stopping pagination.", page_number)
            break

        await go_to_next_page(page)
        page_number += 1
    return scan


async def _crawl_via_playwright(start_url: str, max_price: str, headless: bool, action_timeout_ms: int) -> CatalogScan:
    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=headless)
        try:
            context = await browser.new_context(
                locale="pl-PL",
                user_agent=(
                    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
                    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
                ),
            )
            page = await context.new_page()
            page.set_default_timeout(action_timeout_ms)

            await open_catalog(page, start_url)
            await apply_filters(page, max_price)
            return await collect_fresh_hrefs(page)
        finally:
            await browser.close()


def collect_coffeedesk_fresh_hrefs() -> CatalogScan:
    start_url = os.getenv("COFFEEDESK_START_URL", DEFAULT_START_URL)
    max_price = os.getenv("COFFEEDESK_MAX_PRICE", DEFAULT_MAX_PRICE)
    headless = os.getenv("COFFEEDESK_HEADLESS", "1").lower() not in {"0", "false", "no"}
    run_timeout = float(os.getenv("COFFEEDESK_RUN_TIMEOUT_SECONDS", str(DEFAULT_RUN_TIMEOUT_SECONDS)))
    action_timeout_ms = int(os.getenv("COFFEEDESK_ACTION_TIMEOUT_MS", str(DEFAULT_ACTION_TIMEOUT_MS)))

    return asyncio.run(
        asyncio.wait_for(
            _crawl_via_playwright(start_url, max_price, headless, action_timeout_ms),
            timeout=run_timeout,
        )
    )
