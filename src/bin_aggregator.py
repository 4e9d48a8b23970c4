import logging
from datetime import datetime, time
from typing import Iterable, List

from .data_models import BinReport, DueBin, RawCollectionEntry
from .date_parser import parse_collection_date
from .due_classifier import DEFAULT_CUTOFF, classify
from .exceptions import AggregationError, MalformedDateError

logger = logging.getLogger(__name__)


def _in_bin_order(entries: Iterable[RawCollectionEntry]) -> List[RawCollectionEntry]:
    return sorted(entries, key=lambda entry: entry.bin_type.position)


def build_report(entries: Iterable[RawCollectionEntry], now: datetime, cutoff: time = DEFAULT_CUTOFF) -> BinReport:
    """
    Parses and classifies every entry, keeping each bin's status whether due or not.

    Entries whose title cannot be parsed are logged and recorded in the
    report's errors instead of aborting the others.

    Raises:
        AggregationError: if there were entries and none of them parsed.
    """
    ordered = _in_bin_order(entries)
    report = BinReport(updated_on=now)

    for entry in ordered:
        try:
            collection = parse_collection_date(entry.title)
        except MalformedDateError as e:
            logger.warning(f"Skipping {entry.bin_type.value} bin: {e}")
            report.errors[entry.bin_type] = str(e)
            continue
        report.statuses[entry.bin_type] = classify(collection, now, cutoff)

    if ordered and not report.statuses:
        raise AggregationError({bin_type.value: error for bin_type, error in report.errors.items()})

    return report


def aggregate(entries: Iterable[RawCollectionEntry], now: datetime, cutoff: time = DEFAULT_CUTOFF) -> List[DueBin]:
    """Returns the bins due today or tomorrow, in bin type order."""
    report = build_report(entries, now, cutoff)
    due_bins = report.due_bins
    logger.info(f"{len(due_bins)} of {len(report.statuses)} bin(s) due: {[b.name for b in due_bins]}")
    return due_bins
