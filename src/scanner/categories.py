"""CoinGecko category tagging for scanner results.

Fetches the top 100 coins by market cap plus a curated set of categories
from the CoinGecko free API and maps each base asset symbol to the
category ids it belongs to. The mapping is cached to a JSON file so tags
are available immediately after a restart, then refreshed in the
background when older than ``refresh_hours``.

The free tier allows roughly 10-30 requests per minute, so requests are
spaced by ``request_delay`` seconds and a 429 triggers one delayed retry.
"""

import asyncio
import json
import re
import time
from pathlib import Path
from typing import Any

import aiohttp

from scanner.config import CategorySettings
from scanner.logging import get_logger

logger = get_logger(__name__)

MARKETS_URL = "https://api.coingecko.com/api/v3/coins/markets"

TOP_100 = ("top-100", "Top 100")

TARGET_CATEGORIES: list[tuple[str, str]] = [
    ("layer-1", "Layer 1"),
    ("layer-2", "Layer 2"),
    ("artificial-intelligence", "AI"),
    ("ai-agents", "AI Agents"),
    ("meme-token", "Meme"),
    ("defi", "DeFi"),
    ("gaming", "Gaming"),
    ("real-world-assets-rwa", "RWA"),
    ("privacy-coins", "Privacy"),
    ("solana-ecosystem", "Solana Eco"),
    ("base-ecosystem", "Base Eco"),
    ("ethereum-ecosystem", "Ethereum Eco"),
    ("decentralized-exchange-dex", "DEX"),
    ("non-fungible-tokens-nft", "NFT"),
    ("oracle", "Oracle"),
    ("zero-knowledge-zk", "ZK"),
    ("decentralized-science-desci", "DeSci"),
    ("pump-fun", "Pump.fun"),
]

_QUOTE_SUFFIX = re.compile(r"(USD[TC]?|BTC|ETH)$")


class RateLimited(Exception):
    """CoinGecko answered 429."""


class CategoryMapper:
    """Maps base asset symbols (e.g. "BTC") to CoinGecko category ids.

    Args:
        settings: Cache location, refresh cadence and request spacing.
        user_agent: Sent with every CoinGecko request.
    """

    def __init__(self, settings: CategorySettings, user_agent: str = "CryptoScanner/1.0") -> None:
        self._settings = settings
        self._headers = {"Accept": "application/json", "User-Agent": user_agent}
        self._cache_path = Path(settings.cache_path)
        self.symbol_categories: dict[str, set[str]] = {}
        self.category_names: dict[str, str] = {}
        self.ready = False
        self.last_fetch = 0.0
        self._task: asyncio.Task | None = None  # type: ignore[type-arg]

    # ──────────────────────────────────────────────
    # Lifecycle
    # ──────────────────────────────────────────────

    async def start(self) -> None:
        """Load the file cache, then fetch and refresh in the background."""
        self.load_cache()
        if self._task is None:
            self._task = asyncio.create_task(self._refresh_loop(), name="category-refresh")

    async def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    def is_stale(self, now: float | None = None) -> bool:
        now = now if now is not None else time.time()
        return now - self.last_fetch > self._settings.refresh_hours * 3600

    async def _refresh_loop(self) -> None:
        while True:
            if self.is_stale():
                try:
                    await self.fetch_all()
                except asyncio.CancelledError:
                    raise
                except Exception:
                    logger.warning("category_refresh_failed", exc_info=True)
            await asyncio.sleep(self._settings.check_interval)

    # ──────────────────────────────────────────────
    # File cache
    # ──────────────────────────────────────────────

    def load_cache(self) -> bool:
        """Load the JSON cache if present. Returns True if any symbols were loaded."""
        if not self._cache_path.exists():
            return False
        try:
            data = json.loads(self._cache_path.read_text(encoding="utf-8"))
            self.symbol_categories = {
                sym: set(cats) for sym, cats in data.get("symbolCategories", {}).items()
            }
            self.category_names = dict(data.get("categoryNames", {}))
            self.last_fetch = float(data.get("lastFetch", 0))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("category_cache_load_failed", path=str(self._cache_path), error=str(e))
            return False
        self.ready = bool(self.symbol_categories)
        logger.info("category_cache_loaded", symbols=len(self.symbol_categories))
        return self.ready

    def save_cache(self) -> None:
        try:
            self._cache_path.parent.mkdir(parents=True, exist_ok=True)
            self._cache_path.write_text(
                json.dumps(
                    {
                        "symbolCategories": {
                            sym: sorted(cats) for sym, cats in self.symbol_categories.items()
                        },
                        "categoryNames": self.category_names,
                        "lastFetch": self.last_fetch,
                    }
                ),
                encoding="utf-8",
            )
        except OSError as e:
            logger.warning("category_cache_save_failed", path=str(self._cache_path), error=str(e))

    # ──────────────────────────────────────────────
    # CoinGecko fetch
    # ──────────────────────────────────────────────

    async def _fetch_coins(self, session: aiohttp.ClientSession, params: dict[str, Any]) -> list[dict]:
        query = {"vs_currency": "usd", "page": 1, "sparkline": "false", **params}
        if self._settings.api_key:
            query["x_cg_demo_api_key"] = self._settings.api_key
        async with session.get(MARKETS_URL, params=query) as resp:
            if resp.status == 429:
                raise RateLimited()
            resp.raise_for_status()
            data = await resp.json(content_type=None)
        return data if isinstance(data, list) else []

    def _tag(self, coins: list[dict], category_id: str) -> int:
        tagged = 0
        for coin in coins:
            sym = str(coin.get("symbol", "")).upper()
            if not sym:
                continue
            self.symbol_categories.setdefault(sym, set()).add(category_id)
            tagged += 1
        return tagged

    async def _fetch_category(
        self, session: aiohttp.ClientSession, category_id: str, params: dict[str, Any]
    ) -> int:
        try:
            try:
                coins = await self._fetch_coins(session, params)
            except RateLimited:
                logger.warning("category_rate_limited", category=category_id)
                await asyncio.sleep(self._settings.rate_limit_delay)
                coins = await self._fetch_coins(session, params)
        except (aiohttp.ClientError, TimeoutError, ValueError, RateLimited) as e:
            logger.warning("category_fetch_failed", category=category_id, error=repr(e))
            return 0
        count = self._tag(coins, category_id)
        logger.info("category_fetched", category=category_id, coins=count)
        return count

    async def fetch_all(self) -> None:
        """Fetch the top 100 and every target category, then save the cache."""
        logger.info("category_fetch_started", categories=len(TARGET_CATEGORIES) + 1)
        total = 0
        timeout = aiohttp.ClientTimeout(total=30)
        async with aiohttp.ClientSession(timeout=timeout, headers=self._headers, trust_env=True) as session:
            self.category_names[TOP_100[0]] = TOP_100[1]
            total += await self._fetch_category(
                session, TOP_100[0], {"order": "market_cap_desc", "per_page": 100}
            )
            for category_id, name in TARGET_CATEGORIES:
                await asyncio.sleep(self._settings.request_delay)
                self.category_names[category_id] = name
                total += await self._fetch_category(
                    session, category_id, {"category": category_id, "per_page": 250}
                )

        self.last_fetch = time.time()
        self.ready = True
        self.save_cache()
        logger.info(
            "category_fetch_complete",
            symbols=len(self.symbol_categories),
            mappings=total,
        )

    # ──────────────────────────────────────────────
    # Lookups
    # ──────────────────────────────────────────────

    def get_categories(self, symbol: str) -> set[str]:
        """Category ids for a display ("BTC/USD") or native ("BTCUSD") symbol."""
        if "/" in symbol:
            base = symbol.split("/", 1)[0]
        else:
            base = _QUOTE_SUFFIX.sub("", symbol)
        return set(self.symbol_categories.get(base.upper(), ()))

    def get_category_list(self) -> list[dict[str, Any]]:
        """Non-empty categories with coin counts; Top 100 first, then the curated order."""
        result = []
        for category_id, name in [TOP_100, *TARGET_CATEGORIES]:
            count = sum(1 for cats in self.symbol_categories.values() if category_id in cats)
            if count > 0:
                result.append({"id": category_id, "name": name, "count": count})
        return result
