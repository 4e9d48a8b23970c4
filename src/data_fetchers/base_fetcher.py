import abc
from ..data_models import FeedResult

class BinFeedFetcher(abc.ABC):
    """Abstract base class for fetching the bin collection feed."""

    # Short name used in logs and cache filenames
    source_name: str = "unknown"

    @abc.abstractmethod
    def get_collection_entries(self) -> FeedResult:
        """
        Fetches the latest collection announcement for each bin type.

        Returns:
            A FeedResult holding one RawCollectionEntry per bin type found.

        Raises:
            FeedFetchError: if the feed could not be fetched or understood.
        """
        pass
