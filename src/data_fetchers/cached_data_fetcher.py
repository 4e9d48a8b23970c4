import logging
import json
import os
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from .base_fetcher import BinFeedFetcher
from ..data_models import BinType, FeedResult, RawCollectionEntry

# --- Define Cache Directory ---
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
CACHE_DIR = os.path.join(project_root, 'cache')
DEFAULT_MAX_AGE = timedelta(hours=12)

logger = logging.getLogger(__name__)

# --- Cache Helper Functions ---
def _get_cache_filename(cache_key: str) -> str:
    """Generates the cache filename within the CACHE_DIR."""
    os.makedirs(CACHE_DIR, exist_ok=True)
    safe_key = cache_key.replace(' ', '_').replace('/', '_').replace('\\', '_').lower()
    return os.path.join(CACHE_DIR, f"{safe_key}.json")

def load_feed_from_cache(cache_key: str) -> Optional[Dict[str, Any]]:
    """ Loads the cached feed as a dictionary. """
    filename = _get_cache_filename(cache_key)
    try:
        with open(filename, 'r') as f:
            data = json.load(f)
            if isinstance(data.get("entries"), list) and isinstance(data.get("fetched_on"), str):
                return data
            else:
                logger.warning(f"Invalid cache format {filename}.")
                return None
    except FileNotFoundError:
        logger.info(f"Cache MISS for {cache_key}. File not found: {filename}")
        return None
    except (json.JSONDecodeError, KeyError, IOError, TypeError) as e:
        logger.error(f"Error loading cache {filename}: {e}", exc_info=True)
        return None

def save_feed_to_cache(cache_key: str, result: FeedResult):
    """ Saves the FeedResult (entries as dicts, fetch time as ISO string) to cache. """
    filename = _get_cache_filename(cache_key)
    data_to_save = {"source": result.source, "fetched_on": result.fetched_on.isoformat(), "entries": result.entries_as_dicts()}
    try:
        with open(filename, 'w') as f: json.dump(data_to_save, f, indent=4)
        logger.info(f"Feed saved to cache file: {filename}")
    except IOError as e:
        # A cache write failure should not fail the run
        logger.error(f"Error saving cache {filename}: {e}", exc_info=True)

def feed_result_from_cache(data: Dict[str, Any]) -> FeedResult:
    """Rebuilds a FeedResult from cached JSON. Raises KeyError/ValueError on bad data."""
    entries = [RawCollectionEntry(bin_type=BinType(item["bin_type"]), title=item["title"]) for item in data["entries"]]
    return FeedResult(source=data.get("source", "cache"), fetched_on=datetime.fromisoformat(data["fetched_on"]), entries=entries)


class CachedFeedFetcher(BinFeedFetcher):
    """ Caching layer for another BinFeedFetcher; entries older than max_age are refetched. """
    def __init__(self, underlying_fetcher: BinFeedFetcher, max_age: timedelta = DEFAULT_MAX_AGE, cache_key: Optional[str] = None):
        if not isinstance(underlying_fetcher, BinFeedFetcher): raise TypeError("underlying_fetcher must be a BinFeedFetcher")
        self._fetcher = underlying_fetcher
        self.max_age = max_age
        self.source_name = underlying_fetcher.source_name
        self.cache_key = cache_key or self.source_name
        logger.info(f"CachedFeedFetcher initialized, wrapping {type(underlying_fetcher).__name__}")

    def get_collection_entries(self, now: Optional[datetime] = None) -> FeedResult:
        if now is None:
            now = datetime.now()

        # 1. Try loading from cache
        cached_data = load_feed_from_cache(self.cache_key)
        if cached_data is not None:
            try:
                cached_result = feed_result_from_cache(cached_data)
                age = now - cached_result.fetched_on
                if timedelta(0) <= age <= self.max_age:
                    logger.info(f"CachedFeedFetcher: Cache HIT for {self.cache_key} (age {age})")
                    return cached_result
                logger.info(f"CachedFeedFetcher: Cache STALE for {self.cache_key} (age {age}, max {self.max_age})")
            except (TypeError, KeyError, ValueError) as e:
                logger.error(f"Failed to reconstruct FeedResult from cache: {e}", exc_info=True)
                # Fall through to fetch

        # 2. Cache MISS, stale or unreadable; FeedFetchError propagates
        logger.info(f"CachedFeedFetcher: Calling underlying fetcher for {self.cache_key}.")
        fetched_result = self._fetcher.get_collection_entries()

        # 3. Save successful fetches
        save_feed_to_cache(self.cache_key, fetched_result)
        return fetched_result
