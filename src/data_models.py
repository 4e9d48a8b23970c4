from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

class BinType(Enum):
    """Bin types in feed order (channel 0 is waste, 1 garden, 2 recycling)."""
    WASTE = "waste"
    GARDEN = "garden"
    RECYCLING = "recycling"

    @classmethod
    def ordered(cls) -> List["BinType"]:
        return list(cls)

    @property
    def position(self) -> int:
        return BinType.ordered().index(self)


class DueOn(Enum):
    TODAY = "today"
    TOMORROW = "tomorrow"
    NONE = "none"


@dataclass(frozen=True)
class RawCollectionEntry:
    """One feed item: the unparsed title announcing a bin's next collection."""
    bin_type: BinType
    title: str


@dataclass(frozen=True)
class ParsedCollectionDate:
    """A collection day, anchored at 23:00 local time on that day."""
    instant: datetime

    @property
    def date(self) -> date:
        return self.instant.date()

    @property
    def iso(self) -> str:
        return self.instant.isoformat()

    @property
    def locale_date(self) -> str:
        # en-GB day/month/year
        return self.instant.strftime("%d/%m/%Y")

    @property
    def title_date(self) -> str:
        return f"{self.instant.day} {self.instant.strftime('%B')} {self.instant.year}"


@dataclass(frozen=True)
class DueStatus:
    is_due: bool
    due_on: DueOn
    collection_date: ParsedCollectionDate
    days_until_due: str

    def __post_init__(self):
        if self.is_due != (self.due_on is not DueOn.NONE):
            raise ValueError(f"Inconsistent DueStatus: is_due={self.is_due}, due_on={self.due_on.value}")


@dataclass(frozen=True)
class DueBin:
    bin_type: BinType
    status: DueStatus

    @property
    def name(self) -> str:
        return self.bin_type.value

    @property
    def due_on(self) -> DueOn:
        return self.status.due_on


@dataclass
class FeedResult:
    """Represents the successful result from a BinFeedFetcher."""
    source: str
    fetched_on: datetime
    entries: List[RawCollectionEntry]

    # Helper method to convert entries to list of dicts for JSON/cache
    def entries_as_dicts(self) -> List[dict]:
        return [{"bin_type": entry.bin_type.value, "title": entry.title} for entry in self.entries]


@dataclass
class BinReport:
    """Time-stamped snapshot of every bin's status, for query/JSON output."""
    updated_on: datetime
    statuses: Dict[BinType, DueStatus] = field(default_factory=dict)
    errors: Dict[BinType, str] = field(default_factory=dict)

    @property
    def due_bins(self) -> List[DueBin]:
        return [DueBin(bin_type, status) for bin_type, status in self.statuses.items() if status.is_due]

    def as_dict(self) -> Dict[str, Any]:
        bins: Dict[str, Any] = {}
        for bin_type in BinType.ordered():
            if bin_type in self.statuses:
                status = self.statuses[bin_type]
                bins[bin_type.value] = {
                    "isDue": status.is_due,
                    "dueOn": status.due_on.value,
                    "daysUntilDue": status.days_until_due,
                    "collectionDate": status.collection_date.iso,
                }
            elif bin_type in self.errors:
                bins[bin_type.value] = {"error": self.errors[bin_type]}
        return {"updatedOn": self.updated_on.isoformat(), "bins": bins}


# Sentinel for "nothing due": compose() returns None and callers send nothing.
NotificationMessage = Optional[str]
