from typing import Dict, Optional


class BinBotError(Exception):
    """Base class for errors raised by the bin bot."""


class MalformedDateError(BinBotError):
    """A feed title could not be read as a collection date."""

    def __init__(self, title: str, reason: Optional[str] = None):
        self.title = title
        self.reason = reason
        message = f"Malformed collection date title: {title!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class AggregationError(BinBotError):
    """Every bin in the feed failed to parse."""

    def __init__(self, failures: Dict[str, str]):
        self.failures = failures
        details = "; ".join(f"{name}: {error}" for name, error in failures.items())
        super().__init__(f"No bin collection dates could be parsed ({details})")


class FeedFetchError(BinBotError):
    """The collection feed could not be fetched or converted."""


class DeliveryError(BinBotError):
    """The notification could not be delivered."""
