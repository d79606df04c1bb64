"""Tests for the streaming entity state machine."""

import pytest

from app.domain.live.streaming.streaming_state_machine import StreamingStateMachine
from app.schemas import StreamingStatus

S = StreamingStatus


class TestTransitions:
    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (S.INATIVO, S.ATIVO),
            (S.ATIVO, S.INATIVO),
            (S.INATIVO, S.BLOQUEADO),
            (S.ATIVO, S.BLOQUEADO),
            (S.BLOQUEADO, S.INATIVO),
            (S.INATIVO, S.REMOVIDO),
            (S.ATIVO, S.REMOVIDO),
            (S.BLOQUEADO, S.REMOVIDO),
        ],
    )
    def test_allowed(self, current, target):
        assert StreamingStateMachine.can_transition(current, target)

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (S.BLOQUEADO, S.ATIVO),
            (S.REMOVIDO, S.INATIVO),
            (S.REMOVIDO, S.ATIVO),
            (S.REMOVIDO, S.BLOQUEADO),
        ],
    )
    def test_rejected(self, current, target):
        assert not StreamingStateMachine.can_transition(current, target)

    def test_removed_is_terminal(self):
        assert StreamingStateMachine.is_terminal(S.REMOVIDO)
        assert StreamingStateMachine.TRANSITIONS[S.REMOVIDO] == set()
        assert not StreamingStateMachine.is_terminal(S.BLOQUEADO)

    def test_valid_sources_of_blocked(self):
        assert StreamingStateMachine.get_valid_sources(S.BLOQUEADO) == {S.INATIVO, S.ATIVO}


class TestAcceptsRequest:
    def test_same_state_is_forwarded(self):
        """Same-state requests reach the control service, which reports the no-op."""
        assert StreamingStateMachine.accepts_request(S.ATIVO, S.ATIVO, "ligar")
        assert StreamingStateMachine.accepts_request(S.INATIVO, S.INATIVO, "desligar")

    def test_nothing_is_forwarded_from_removed(self):
        for target in S:
            assert not StreamingStateMachine.accepts_request(S.REMOVIDO, target)

    def test_turn_off_does_not_unblock(self):
        assert not StreamingStateMachine.accepts_request(S.BLOQUEADO, S.INATIVO, "desligar")
        assert StreamingStateMachine.accepts_request(S.BLOQUEADO, S.INATIVO, "desbloquear")

    def test_unblock_does_not_turn_off(self):
        assert not StreamingStateMachine.accepts_request(S.ATIVO, S.INATIVO, "desbloquear")
        assert StreamingStateMachine.accepts_request(S.ATIVO, S.INATIVO, "desligar")

    def test_turn_on_blocked_is_rejected(self):
        assert not StreamingStateMachine.accepts_request(S.BLOQUEADO, S.ATIVO, "ligar")
