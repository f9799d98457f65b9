import asyncio

import pytest

from coffee_radar.collectors import coffeedesk_scraper
from coffee_radar.collectors.base import CatalogScan
from coffee_radar.collectors.coffeedesk_page import DEFAULT_START_URL
from coffee_radar.db import connection
from coffee_radar.db.repository import fetch_latest_scan_run
from coffee_radar.jobs import scan_and_export

ENV_VARS = [
    "COFFEEDESK_START_URL",
    "COFFEEDESK_MAX_PRICE",
    "COFFEEDESK_HEADLESS",
    "COFFEEDESK_RUN_TIMEOUT_SECONDS",
    "COFFEEDESK_ACTION_TIMEOUT_MS",
]


@pytest.fixture()
def crawl_calls(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    calls: list = []

    async def fake_crawl(start_url: str, max_price: str, headless: bool, action_timeout_ms: int) -> CatalogScan:
        calls.append((start_url, max_price, headless, action_timeout_ms))
        return CatalogScan()

    monkeypatch.setattr(coffeedesk_scraper, "_crawl_via_playwright", fake_crawl)
    return calls


def test_defaults_reach_the_crawler(crawl_calls) -> None:
    coffeedesk_scraper.collect_coffeedesk_fresh_hrefs()
    assert crawl_calls == [(DEFAULT_START_URL, "80", True, 0)]


@pytest.mark.parametrize("value", ["0", "false", "No"])
def test_headless_can_be_switched_off(crawl_calls, monkeypatch, value: str) -> None:
    monkeypatch.setenv("COFFEEDESK_HEADLESS", value)
    coffeedesk_scraper.collect_coffeedesk_fresh_hrefs()
    assert crawl_calls[0][2] is False


def test_environment_overrides_reach_the_crawler(crawl_calls, monkeypatch) -> None:
    monkeypatch.setenv("COFFEEDESK_START_URL", "https://example.test/kawa/")
    monkeypatch.setenv("COFFEEDESK_MAX_PRICE", "65")
    monkeypatch.setenv("COFFEEDESK_HEADLESS", "1")
    monkeypatch.setenv("COFFEEDESK_ACTION_TIMEOUT_MS", "15000")
    coffeedesk_scraper.collect_coffeedesk_fresh_hrefs()
    assert crawl_calls == [("https://example.test/kawa/", "65", True, 15000)]


@pytest.fixture()
def hung_crawl(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("COFFEEDESK_RUN_TIMEOUT_SECONDS", "0.01")

    async def slow_crawl(start_url: str, max_price: str, headless: bool, action_timeout_ms: int) -> CatalogScan:
        await asyncio.sleep(5)
        return CatalogScan()

    monkeypatch.setattr(coffeedesk_scraper, "_crawl_via_playwright", slow_crawl)


def test_run_deadline_aborts_the_crawl(hung_crawl) -> None:
    with pytest.raises(asyncio.TimeoutError):
        coffeedesk_scraper.collect_coffeedesk_fresh_hrefs()


def test_run_deadline_leaves_previous_output_untouched(hung_crawl, tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(connection, "DB_PATH", tmp_path / "app.db")
    out = tmp_path / "hrefs.txt"
    out.write_text("/previous", encoding="utf-8")
    monkeypatch.setenv("COFFEEDESK_OUTPUT_PATH", str(out))

    with pytest.raises(asyncio.TimeoutError):
        scan_and_export.run_scan()

    assert out.read_text(encoding="utf-8") == "/previous"
    assert fetch_latest_scan_run()["status"] == "FAILED"
