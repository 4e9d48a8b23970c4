import pytest
import os
import sys
from datetime import date, datetime, time

project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from src.data_models import DueOn, DueStatus
from src.date_parser import parse_collection_date
from src.due_classifier import classify, days_until_due, parse_cutoff, DEFAULT_CUTOFF

COLLECTION_8_JUL = parse_collection_date("Sun 8 Jul 2018")
COLLECTION_9_JUL = parse_collection_date("Mon 9 Jul 2018")


def test_due_tomorrow():
    status = classify(COLLECTION_9_JUL, datetime(2018, 7, 8, 10, 0))
    assert status.is_due is True
    assert status.due_on == DueOn.TOMORROW
    assert status.days_until_due == "tomorrow"
    assert status.collection_date == COLLECTION_9_JUL

def test_due_tomorrow_regardless_of_cutoff():
    status = classify(COLLECTION_9_JUL, datetime(2018, 7, 8, 23, 30))
    assert status.due_on == DueOn.TOMORROW

def test_due_today_before_cutoff():
    status = classify(COLLECTION_8_JUL, datetime(2018, 7, 8, 6, 0))
    assert status.is_due is True
    assert status.due_on == DueOn.TODAY
    assert status.days_until_due == "today"

def test_due_today_exactly_at_cutoff():
    status = classify(COLLECTION_8_JUL, datetime(2018, 7, 8, 21, 11, 0))
    assert status.due_on == DueOn.TODAY

def test_not_due_after_cutoff():
    status = classify(COLLECTION_8_JUL, datetime(2018, 7, 8, 22, 0))
    assert status.is_due is False
    assert status.due_on == DueOn.NONE
    # The label is calendar based and ignores the cutoff
    assert status.days_until_due == "today"

def test_custom_cutoff():
    now = datetime(2018, 7, 8, 18, 30)
    assert classify(COLLECTION_8_JUL, now, cutoff=time(18, 0)).due_on == DueOn.NONE
    assert classify(COLLECTION_8_JUL, now, cutoff=time(19, 0)).due_on == DueOn.TODAY

def test_not_due_later_or_past():
    assert classify(parse_collection_date("Thu 12 Jul 2018"), datetime(2018, 7, 8, 10, 0)).is_due is False
    assert classify(parse_collection_date("Sat 7 Jul 2018"), datetime(2018, 7, 8, 10, 0)).is_due is False

def test_due_tomorrow_across_month_end():
    status = classify(parse_collection_date("Wed 1 Aug 2018"), datetime(2018, 7, 31, 20, 0))
    assert status.due_on == DueOn.TOMORROW

def test_due_label_matches_due_on():
    for now in [datetime(2018, 7, 8, 0, 0), datetime(2018, 7, 8, 12, 0), datetime(2018, 7, 8, 21, 0)]:
        for collection in (COLLECTION_8_JUL, COLLECTION_9_JUL):
            status = classify(collection, now)
            if status.is_due:
                assert status.days_until_due == status.due_on.value

@pytest.mark.parametrize("collection_day, expected", [
    (date(2018, 7, 8), "today"),
    (date(2018, 7, 9), "tomorrow"),
    (date(2018, 7, 11), "3 days"),
    (date(2018, 7, 7), "1 day ago"),
    (date(2018, 7, 5), "3 days ago"),
])
def test_days_until_due(collection_day, expected):
    assert days_until_due(collection_day, datetime(2018, 7, 8, 22, 0)) == expected

def test_parse_cutoff():
    assert parse_cutoff("21:11") == DEFAULT_CUTOFF
    assert parse_cutoff(" 07:30:15 ") == time(7, 30, 15)
    with pytest.raises(ValueError):
        parse_cutoff("9pm")

def test_due_status_rejects_inconsistent_values():
    with pytest.raises(ValueError):
        DueStatus(is_due=True, due_on=DueOn.NONE, collection_date=COLLECTION_8_JUL, days_until_due="today")
