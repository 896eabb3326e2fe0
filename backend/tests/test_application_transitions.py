from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from internhub.services.applications import allowed_transitions, can_transition


@pytest.mark.parametrize("target", ["accepted", "rejected", "withdrawn"])
def test_pending_can_move_to_any_decision(target):
    assert can_transition("pending", target, allow_reopen_withdrawn=False)


@pytest.mark.parametrize("terminal", ["accepted", "rejected", "withdrawn"])
def test_terminal_states_have_no_exits(terminal):
    assert allowed_transitions(terminal, allow_reopen_withdrawn=False) == set()


def test_reopen_flag_only_opens_withdrawn_to_pending():
    assert allowed_transitions("withdrawn", allow_reopen_withdrawn=True) == {"pending"}
    assert allowed_transitions("rejected", allow_reopen_withdrawn=True) == set()
    assert allowed_transitions("accepted", allow_reopen_withdrawn=True) == set()


def test_unknown_state_has_no_transitions():
    assert not can_transition("archived", "pending", allow_reopen_withdrawn=True)
    assert not can_transition("pending", "pending", allow_reopen_withdrawn=False)
