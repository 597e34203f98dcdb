import pytest

from clinicq.models import STATUS_NEXT, STATUS_WAITING, QueueEntry, parse_availability, parse_queue


def test_parse_queue_keeps_order_and_duplicates():
    q = parse_queue(
        [
            {"name": "Ana", "status": "next"},
            {"name": "Lee", "status": "waiting"},
            {"name": "Ana", "status": "waiting"},
        ]
    )
    assert q == (
        QueueEntry("Ana", STATUS_NEXT),
        QueueEntry("Lee", STATUS_WAITING),
        QueueEntry("Ana", STATUS_WAITING),
    )


def test_parse_queue_is_lenient_with_items():
    q = parse_queue([{"name": "Bob"}, "junk", {"status": "next"}, {"name": "Cy", "status": None}])
    assert q == (QueueEntry("Bob", STATUS_WAITING), QueueEntry("Cy", STATUS_WAITING))


def test_parse_queue_rejects_non_list():
    with pytest.raises(ValueError):
        parse_queue({"queue": []})


def test_parse_availability():
    assert parse_availability(True) is True
    assert parse_availability({"available": False}) is False
    with pytest.raises(ValueError):
        parse_availability("yes")
    with pytest.raises(ValueError):
        parse_availability({})
