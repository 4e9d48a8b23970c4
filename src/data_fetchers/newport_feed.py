import logging
import requests
from bs4 import BeautifulSoup
from datetime import datetime
from typing import List, Optional
from .base_fetcher import BinFeedFetcher
from ..data_models import BinType, FeedResult, RawCollectionEntry
from ..exceptions import FeedFetchError

# --- Configuration ---
BASE_URL = "http://www.newport.gov.uk"
SERVICE_URL = f"{BASE_URL}/model/ncc/services/myNewportService.cfc"
DEFAULT_UPRN = "100100692236"
HEADERS = {
    'User-Agent': 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/90.0.4430.212 Safari/537.36',
    'Accept': 'application/xml,text/xml;q=0.9,*/*;q=0.8',
}
# The council site often fails to respond first time
DEFAULT_ATTEMPTS = 3
# Channel position in the feed -> bin type
CHANNEL_BIN_TYPES = BinType.ordered()

logger = logging.getLogger(__name__)


def build_feed_url(uprn: str) -> str:
    return f"{SERVICE_URL}?method=getPropertyData&uprn={uprn}&group=Waste+Collection"


def parse_feed(xml: str) -> List[RawCollectionEntry]:
    """Converts the council's RSS-style XML into one entry per bin channel."""
    soup = BeautifulSoup(xml, 'html.parser')
    channels = soup.find_all('channel')
    if not channels:
        raise FeedFetchError("No <channel> elements found in collection feed")
    if len(channels) > len(CHANNEL_BIN_TYPES):
        logger.warning(f"Feed has {len(channels)} channels, ignoring those after the first {len(CHANNEL_BIN_TYPES)}")

    entries = []
    for bin_type, channel in zip(CHANNEL_BIN_TYPES, channels):
        item = channel.find('item')
        title = item.find('title') if item else None
        if title is None or not title.get_text(strip=True):
            logger.warning(f"No item title in feed channel for {bin_type.value} bin, skipping")
            continue
        entries.append(RawCollectionEntry(bin_type=bin_type, title=title.get_text(strip=True)))
    if not entries:
        raise FeedFetchError("No collection titles found in any feed channel")
    return entries


class NewportFeedFetcher(BinFeedFetcher):
    """Fetches bin collection data from the Newport City Council property feed."""

    source_name = "newport"

    def __init__(self, uprn: str = DEFAULT_UPRN, feed_url: Optional[str] = None,
                 attempts: int = DEFAULT_ATTEMPTS, timeout: int = 30):
        if attempts < 1:
            raise ValueError("attempts must be at least 1")
        self.uprn = uprn
        self.feed_url = feed_url or build_feed_url(uprn)
        self.attempts = attempts
        self.timeout = timeout

    def _fetch_xml(self) -> str:
        last_error = None
        for attempt in range(1, self.attempts + 1):
            try:
                response = requests.get(self.feed_url, headers=HEADERS, timeout=self.timeout)
                response.raise_for_status()
                return response.text
            except requests.exceptions.RequestException as e:
                last_error = e
                logger.warning(f"Feed request attempt {attempt}/{self.attempts} failed: {e}")
        raise FeedFetchError(f"Error fetching Newport Council data after {self.attempts} attempts: {last_error}") from last_error

    def get_collection_entries(self) -> FeedResult:
        logger.info(f"Fetching collection feed for UPRN {self.uprn}")
        xml = self._fetch_xml()
        entries = parse_feed(xml)
        logger.info(f"Feed returned {len(entries)} bin entries")
        return FeedResult(source=self.source_name, fetched_on=datetime.now(), entries=entries)
