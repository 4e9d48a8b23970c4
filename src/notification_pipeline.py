import logging
from dataclasses import dataclass, field
from datetime import datetime, time
from typing import List, Optional

from .bin_aggregator import aggregate
from .data_fetchers.base_fetcher import BinFeedFetcher
from .data_models import DueBin
from .due_classifier import DEFAULT_CUTOFF
from .exceptions import AggregationError, DeliveryError, FeedFetchError
from .message_composer import compose
from .notifiers.base_notifier import Notifier

logger = logging.getLogger(__name__)

STATUS_SENT = "sent"
STATUS_NOTHING_DUE = "nothing_due"
STATUS_DRY_RUN = "dry_run"
STATUS_ERROR = "error"

ERROR_TRANSPORT = "transport"
ERROR_AGGREGATION = "aggregation"
ERROR_DELIVERY = "delivery"


@dataclass
class PipelineResult:
    """Outcome of one notification run."""
    status: str
    message: Optional[str] = None
    due_bins: List[DueBin] = field(default_factory=list)
    error_kind: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.status != STATUS_ERROR


def run_pipeline(fetcher: BinFeedFetcher, notifier: Optional[Notifier], now: datetime,
                 cutoff: time = DEFAULT_CUTOFF, message_prefix: str = "", dry_run: bool = False) -> PipelineResult:
    """
    Fetches the feed, works out which bins are due and sends one notification.

    Nothing is sent when no bin is due. Errors are logged and returned in the
    result rather than raised.
    """
    logger.info(f"Checking bin data at {now.isoformat()}")

    # 1. Fetch
    try:
        feed = fetcher.get_collection_entries()
    except FeedFetchError as e:
        logger.error(f"Feed fetch failed: {e}", exc_info=True)
        return PipelineResult(status=STATUS_ERROR, error_kind=ERROR_TRANSPORT, error=e)

    # 2. Aggregate
    try:
        due_bins = aggregate(feed.entries, now, cutoff)
    except AggregationError as e:
        logger.error(f"Could not work out any bin collections: {e}", exc_info=True)
        return PipelineResult(status=STATUS_ERROR, error_kind=ERROR_AGGREGATION, error=e)

    # 3. Compose, short-circuiting when nothing is due
    message = compose(due_bins)
    if message is None:
        logger.info("No bins due today or tomorrow, not sending a notification")
        return PipelineResult(status=STATUS_NOTHING_DUE)

    text = f"{message_prefix}{message}"
    if dry_run:
        logger.info(f"Dry run, not sending: {text}")
        return PipelineResult(status=STATUS_DRY_RUN, message=text, due_bins=due_bins)

    # 4. Deliver
    if notifier is None:
        error = DeliveryError("No notifier configured")
        logger.error(f"Cannot deliver '{text}': {error}")
        return PipelineResult(status=STATUS_ERROR, message=text, due_bins=due_bins, error_kind=ERROR_DELIVERY, error=error)
    try:
        notifier.send(text)
    except DeliveryError as e:
        logger.error(f"Notification delivery failed: {e}", exc_info=True)
        return PipelineResult(status=STATUS_ERROR, message=text, due_bins=due_bins, error_kind=ERROR_DELIVERY, error=e)

    logger.info(f"Sent notification: {text}")
    return PipelineResult(status=STATUS_SENT, message=text, due_bins=due_bins)
