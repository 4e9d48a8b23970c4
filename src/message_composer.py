import logging
from typing import List, Optional, Sequence

from .data_models import DueBin, DueOn

logger = logging.getLogger(__name__)


def join_bin_names(names: Sequence[str]) -> str:
    """
    Joins bin names as an English list with only the first letter capitalised.

    ["garden"] -> "Garden"
    ["garden", "recycling"] -> "Garden and recycling"
    ["waste", "garden", "recycling"] -> "Waste, garden, and recycling"
    """
    if not names:
        return ""
    if len(names) == 1:
        phrase = names[0]
    elif len(names) == 2:
        phrase = f"{names[0]} and {names[1]}"
    else:
        phrase = f"{', '.join(names[:-1])}, and {names[-1]}"
    return phrase[:1].upper() + phrase[1:]


def compose_day_sentence(names: Sequence[str], day: str) -> str:
    if not names:
        return ""
    verb = "bin is" if len(names) == 1 else "bins are"
    return f"{join_bin_names(names)} {verb} being collected {day}."


def compose(due_bins: List[DueBin]) -> Optional[str]:
    """
    Builds the notification text for the due bins.

    Returns None when nothing is due; callers must not send anything then.
    """
    today = [b.name for b in due_bins if b.due_on is DueOn.TODAY]
    tomorrow = [b.name for b in due_bins if b.due_on is DueOn.TOMORROW]

    sentences = []
    if today:
        sentences.append(compose_day_sentence(today, DueOn.TODAY.value))
    if tomorrow:
        sentences.append(compose_day_sentence(tomorrow, DueOn.TOMORROW.value))

    if not sentences:
        logger.info("No bins are being collected today or tomorrow")
        return None
    return " ".join(sentences)
