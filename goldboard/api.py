"""Remote rate clients: Metals.Dev gold prices and USD exchange rates."""

import hashlib
import json
import logging
import os
import time
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

import httpx

from .models import FxRate, SeriesSnapshot
from .series import forward_fill, points_to_anchors

logger = logging.getLogger(__name__)

BASE_URL = "https://api.metals.dev/v1"
FX_BASE_URL = "https://open.er-api.com/v6"
CACHE_DIR = Path.home() / ".cache" / "goldboard"
DEFAULT_CACHE_TTL_SECONDS = 3600  # Default: 1 hour
DEFAULT_LIVE_DAYS = 400
MAX_WINDOW_DAYS = 30  # Metals.Dev timeseries limit per request


class GoldAPIError(Exception):
    """Error from a remote price or exchange rate API."""


def _resolve_cache_ttl(cache_ttl: int | None) -> int:
    # Cache TTL: constructor arg > env var > default (1 hour)
    if cache_ttl is not None:
        return cache_ttl
    env_ttl = os.environ.get("GOLDBOARD_CACHE_TTL")
    return int(env_ttl) if env_ttl else DEFAULT_CACHE_TTL_SECONDS


def clear_cache(cache_dir: Path = CACHE_DIR) -> int:
    """Delete cached responses. Returns the number of files removed."""
    if not cache_dir.exists():
        return 0
    removed = 0
    for path in cache_dir.glob("*.json"):
        path.unlink()
        removed += 1
    logger.info("Cleared %d cached responses from %s", removed, cache_dir)
    return removed


class CachedClient:
    """JSON-over-HTTP client with a TTL file cache."""

    base_url = ""

    def __init__(
        self,
        cache_ttl: int | None = None,
        client: httpx.Client | None = None,
        cache_dir: Path | None = None,
    ):
        self.cache_ttl = _resolve_cache_ttl(cache_ttl)
        self.cache_dir = cache_dir or CACHE_DIR
        self._client = client or httpx.Client(timeout=30.0)
        self.cache_dir.mkdir(parents=True, exist_ok=True)

    def _get_cache_path(self, endpoint: str, params: dict) -> Path:
        """Generate cache file path for a request."""
        safe_endpoint = endpoint.replace("/", "_")
        # Use deterministic hash (sorted JSON) instead of Python's randomized hash()
        params_str = json.dumps(params, sort_keys=True)
        params_hash = hashlib.md5(params_str.encode()).hexdigest()[:12]
        return self.cache_dir / f"{safe_endpoint}_{params_hash}.json"

    def _get_cached(self, cache_path: Path) -> dict | None:
        """Cached body for a request, or None when absent or older than the TTL."""
        try:
            age = time.time() - cache_path.stat().st_mtime
        except FileNotFoundError:
            return None
        if age >= self.cache_ttl:
            return None
        try:
            return json.loads(cache_path.read_text())
        except json.JSONDecodeError:
            logger.debug("Discarding unreadable cache file %s", cache_path)
            return None

    def _save_cache(self, cache_path: Path, data: dict) -> None:
        # Freshness comes from the file's mtime
        cache_path.write_text(json.dumps(data))

    def _request(self, endpoint: str, params: dict | None = None) -> dict:
        """Make API request with caching."""
        params = dict(params or {})

        cache_path = self._get_cache_path(endpoint, params)
        cached = self._get_cached(cache_path)
        if cached:
            logger.debug("Cache hit for %s %s", endpoint, params.get("start_date", ""))
            return cached

        url = f"{self.base_url}/{endpoint}"
        logger.debug("GET %s", url)
        try:
            response = self._client.get(url, params=params)
        except httpx.HTTPError as e:
            raise GoldAPIError(f"Request to {url} failed: {e}") from e

        if response.status_code != 200:
            raise GoldAPIError(f"API error {response.status_code}: {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise GoldAPIError(f"Malformed response from {url}") from e

        self._save_cache(cache_path, data)
        return data

    def close(self) -> None:
        self._client.close()


class GoldAPI(CachedClient):
    """Client for the Metals.Dev gold timeseries API."""

    base_url = BASE_URL

    def __init__(
        self,
        api_key: str | None = None,
        cache_ttl: int | None = None,
        client: httpx.Client | None = None,
        cache_dir: Path | None = None,
    ):
        self.api_key = (
            api_key or os.environ.get("GOLD_API_KEY") or os.environ.get("METALS_API_KEY", "")
        )
        if not self.api_key:
            raise GoldAPIError(
                "API key required. Set GOLD_API_KEY environment variable "
                "or pass api_key to constructor. Get a free key at https://metals.dev"
            )
        super().__init__(cache_ttl=cache_ttl, client=client, cache_dir=cache_dir)

    def _request(self, endpoint: str, params: dict | None = None) -> dict:
        params = dict(params or {})
        params["api_key"] = self.api_key
        data = super()._request(endpoint, params)
        if data.get("status", "success") != "success":
            raise GoldAPIError(data.get("error_message") or f"API error: {data.get('status')}")
        return data

    def get_timeframe(self, start: date, end: date) -> dict[str, float]:
        """Get USD/oz gold prices for every published day in [start, end].

        The API limits each request to 30 days, so longer windows are split
        into consecutive chunks and merged.
        """
        if end < start:
            return {}

        prices: dict[str, float] = {}
        chunk_start = start
        while chunk_start <= end:
            chunk_end = min(end, chunk_start + timedelta(days=MAX_WINDOW_DAYS - 1))
            logger.debug("Fetching gold timeseries %s to %s", chunk_start, chunk_end)

            data = self._request(
                "timeseries",
                {
                    "start_date": chunk_start.strftime("%Y-%m-%d"),
                    "end_date": chunk_end.strftime("%Y-%m-%d"),
                    "currency": "USD",
                    "unit": "toz",
                },
            )

            rates = data.get("rates") or {}
            if not isinstance(rates, dict):
                raise GoldAPIError("Malformed timeseries response: 'rates' is not a mapping")
            for date_str, day in rates.items():
                price = (day or {}).get("metals", {}).get("gold")
                if price:
                    prices[date_str] = float(price)

            chunk_start = chunk_end + timedelta(days=1)

        return dict(sorted(prices.items()))

    def get_snapshot(self, days: int | None = None, today: date | None = None) -> SeriesSnapshot:
        """Daily series for the trailing window, forward-filling unpublished days."""
        if days is None:
            env_days = os.environ.get("GOLDBOARD_LIVE_DAYS")
            days = int(env_days) if env_days else DEFAULT_LIVE_DAYS

        end = today or datetime.now(timezone.utc).date()
        start = end - timedelta(days=days)
        prices = self.get_timeframe(start, end)
        points = forward_fill(prices, start, end)

        return SeriesSnapshot(
            source="Metals.Dev",
            updated_at=max(prices) if prices else end.isoformat(),
            anchors=points_to_anchors(points),
        )


class FxAPI(CachedClient):
    """Client for the open exchange rate API (USD base)."""

    base_url = FX_BASE_URL

    def get_rate(self, quote: str = "IDR", base: str = "USD") -> FxRate:
        """Get the latest base -> quote exchange rate."""
        data = self._request(f"latest/{base}")
        if data.get("result") != "success":
            raise GoldAPIError(f"FX API error: {data.get('error-type', 'unknown error')}")

        rate = (data.get("rates") or {}).get(quote)
        if not rate:
            raise GoldAPIError(f"No {base}/{quote} rate in FX response")

        updated = data.get("time_last_update_unix")
        return FxRate(
            base=base,
            quote=quote,
            rate=float(rate),
            updated_at=datetime.fromtimestamp(updated, tz=timezone.utc) if updated else None,
        )
