import pytest
import os
import sys
from datetime import datetime
from unittest.mock import MagicMock

project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from src.data_fetchers.base_fetcher import BinFeedFetcher
from src.data_models import BinType, FeedResult, RawCollectionEntry
from src.exceptions import DeliveryError, FeedFetchError
from src.notification_pipeline import run_pipeline, ERROR_AGGREGATION, ERROR_DELIVERY, ERROR_TRANSPORT
from src.notifiers.base_notifier import Notifier

NOW = datetime(2018, 7, 8, 10, 0)


def feed(*titles):
    entries = [RawCollectionEntry(bin_type, title) for bin_type, title in zip(BinType.ordered(), titles)]
    return FeedResult(source="test", fetched_on=NOW, entries=entries)


@pytest.fixture
def fetcher():
    return MagicMock(spec=BinFeedFetcher)

@pytest.fixture
def notifier():
    return MagicMock(spec=Notifier)


def test_sends_one_message_for_due_bins(fetcher, notifier):
    fetcher.get_collection_entries.return_value = feed("Tue 9 Jul 2018", "Sun 8 Jul 2018", "Sun 15 Jul 2018")

    result = run_pipeline(fetcher, notifier, NOW, message_prefix="Bin Bot alert: ")

    expected = "Bin Bot alert: Garden bin is being collected today. Waste bin is being collected tomorrow."
    notifier.send.assert_called_once_with(expected)
    assert result.status == "sent"
    assert result.ok
    assert result.message == expected
    assert [b.bin_type for b in result.due_bins] == [BinType.WASTE, BinType.GARDEN]

def test_nothing_due_sends_nothing(fetcher, notifier):
    fetcher.get_collection_entries.return_value = feed("Sun 15 Jul 2018", "Sun 15 Jul 2018", "Sun 22 Jul 2018")

    result = run_pipeline(fetcher, notifier, NOW)

    notifier.send.assert_not_called()
    assert result.status == "nothing_due"
    assert result.ok
    assert result.message is None

def test_after_cutoff_same_day_not_sent(fetcher, notifier):
    fetcher.get_collection_entries.return_value = feed("Sun 15 Jul 2018", "Sun 8 Jul 2018", "Sun 22 Jul 2018")

    result = run_pipeline(fetcher, notifier, datetime(2018, 7, 8, 22, 0))

    notifier.send.assert_not_called()
    assert result.status == "nothing_due"

def test_dry_run_does_not_send(fetcher, notifier):
    fetcher.get_collection_entries.return_value = feed("Tue 9 Jul 2018")

    result = run_pipeline(fetcher, notifier, NOW, dry_run=True)

    notifier.send.assert_not_called()
    assert result.status == "dry_run"
    assert result.message == "Waste bin is being collected tomorrow."

def test_fetch_failure_is_transport_error(fetcher, notifier):
    fetcher.get_collection_entries.side_effect = FeedFetchError("council site down")

    result = run_pipeline(fetcher, notifier, NOW)

    assert result.status == "error"
    assert not result.ok
    assert result.error_kind == ERROR_TRANSPORT
    notifier.send.assert_not_called()

def test_all_titles_malformed_is_aggregation_error(fetcher, notifier):
    fetcher.get_collection_entries.return_value = feed("no date", "no date", "no date")

    result = run_pipeline(fetcher, notifier, NOW)

    assert result.error_kind == ERROR_AGGREGATION
    notifier.send.assert_not_called()

def test_partial_malformed_still_sends(fetcher, notifier):
    fetcher.get_collection_entries.return_value = feed("Tue 9 Jul 2018", "unknown", "Sun 8 Jul 2018")

    result = run_pipeline(fetcher, notifier, NOW)

    assert result.status == "sent"
    notifier.send.assert_called_once_with("Recycling bin is being collected today. Waste bin is being collected tomorrow.")

def test_delivery_failure_reported(fetcher, notifier):
    fetcher.get_collection_entries.return_value = feed("Tue 9 Jul 2018")
    notifier.send.side_effect = DeliveryError("500: Server Error")

    result = run_pipeline(fetcher, notifier, NOW)

    assert result.status == "error"
    assert result.error_kind == ERROR_DELIVERY
    assert result.message == "Waste bin is being collected tomorrow."

def test_missing_notifier_is_delivery_error(fetcher):
    fetcher.get_collection_entries.return_value = feed("Tue 9 Jul 2018")

    result = run_pipeline(fetcher, None, NOW)

    assert result.error_kind == ERROR_DELIVERY
    assert isinstance(result.error, DeliveryError)

def test_feed_without_titles_is_transport_error(fetcher, notifier):
    fetcher.get_collection_entries.side_effect = FeedFetchError("No collection titles found in any feed channel")

    result = run_pipeline(fetcher, notifier, NOW)

    assert result.status == "error"
    assert result.error_kind == ERROR_TRANSPORT
    notifier.send.assert_not_called()
