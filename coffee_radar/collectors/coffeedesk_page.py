from __future__ import annotations

import logging

DEFAULT_START_URL = "https://www.coffeedesk.pl/kawa/metoda-parzenia/przelewowe-metody-parzenia/"

POPUP_HIDE_CSS = "#snrs-popup-wrapper-ns {display: none !important;}"
COOKIE_ACCEPT_SELECTOR = "#CybotCookiebotDialogBodyLevelButtonLevelOptinAllowAll"
LOADER_SELECTOR = ".has-element-loader"

logger = logging.getLogger(__name__)


async def confirm_cookies(page) -> None:
    await page.locator(COOKIE_ACCEPT_SELECTOR).click()


async def open_catalog(page, url: str = DEFAULT_START_URL) -> None:
    logger.info("Opening catalog %s", url)
    await page.goto(url)
    await page.add_style_tag(content=POPUP_HIDE_CSS)
    await confirm_cookies(page)


async def wait_for_loader_to_detach(page) -> None:
    # timeout=0 disables Playwright's per-action timeout; the run deadline is the only bound.
    await page.locator(LOADER_SELECTOR).wait_for(state="detached", timeout=0)
