import logging
from datetime import timedelta
from typing import Optional
from .base_fetcher import BinFeedFetcher
from .newport_feed import NewportFeedFetcher, DEFAULT_UPRN
from .cached_data_fetcher import CachedFeedFetcher, DEFAULT_MAX_AGE

logger = logging.getLogger(__name__)

def create_fetcher(source: str, use_cache: bool, uprn: str = DEFAULT_UPRN, feed_url: Optional[str] = None,
                   cache_max_age: timedelta = DEFAULT_MAX_AGE) -> BinFeedFetcher:
    """
    Factory function to create the appropriate BinFeedFetcher instance.

    Args:
        source: The identifier for the data source (e.g., "newport").
        use_cache: Whether to wrap the fetcher with the caching layer.
        uprn: Property reference passed to the council feed.
        feed_url: Full feed URL, overriding the one built from the UPRN.
        cache_max_age: How long a cached feed stays fresh.

    Returns:
        An instance conforming to the BinFeedFetcher interface.

    Raises:
        ValueError: If the specified source is unknown.
    """
    logger.info(f"Creating fetcher for source: '{source}', use_cache: {use_cache}")

    base_fetcher: BinFeedFetcher

    # 1. Instantiate the base fetcher based on the source
    if source.lower() == "newport":
        base_fetcher = NewportFeedFetcher(uprn=uprn, feed_url=feed_url)
    else:
        logger.error(f"Unknown data source requested: {source}")
        raise ValueError(f"Unknown data source: {source}")

    # 2. Conditionally wrap with the caching fetcher
    if use_cache:
        logger.info(f"Wrapping {type(base_fetcher).__name__} with CachedFeedFetcher.")
        return CachedFeedFetcher(base_fetcher, max_age=cache_max_age, cache_key=f"{source.lower()}_{uprn}")
    else:
        logger.info(f"Using direct fetcher {type(base_fetcher).__name__} (cache disabled).")
        return base_fetcher
