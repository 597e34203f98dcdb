from clinicq.monitor import MonitorBoard

from conftest import entries


def test_board_shows_next_and_waiting():
    board = MonitorBoard.from_queue(entries(("Lee", "waiting"), ("Ana", "next"), ("Mo", "waiting")))
    assert board.head.name == "Ana"
    assert board.lines() == ["Next: Ana", "Waiting: 2 patients", "  Lee", "  Mo"]


def test_board_single_patient():
    board = MonitorBoard.from_queue(entries(("Ana", "waiting")))
    assert board.lines() == ["Next: Ana"]


def test_board_one_waiting_is_singular():
    board = MonitorBoard.from_queue(entries(("Ana", "next"), ("Lee", "waiting")))
    assert board.lines()[1] == "Waiting: 1 patient"


def test_board_empty_queue():
    board = MonitorBoard.from_queue(())
    assert board.head is None
    assert board.lines() == ["No patients in queue."]
