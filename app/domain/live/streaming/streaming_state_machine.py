"""Streaming entity state machine."""

from app.schemas import StreamingStatus


class StreamingStateMachine:
    """State machine for streaming entity status.

    State flow with triggers:
    - INATIVO -> ATIVO (ligar) | BLOQUEADO (bloquear) | REMOVIDO (remover)
    - ATIVO -> INATIVO (desligar) | BLOQUEADO (bloquear) | REMOVIDO (remover)
    - BLOQUEADO -> INATIVO (desbloquear) | REMOVIDO (remover)
    - REMOVIDO is terminal

    Restart (reiniciar) keeps an ATIVO entity ATIVO. A request whose target
    equals the current status is not a transition; the control service decides
    whether it is an idempotent no-op or a failure.
    """

    TRANSITIONS: dict[StreamingStatus, set[StreamingStatus]] = {
        StreamingStatus.INATIVO: {
            StreamingStatus.ATIVO,
            StreamingStatus.BLOQUEADO,
            StreamingStatus.REMOVIDO,
        },
        StreamingStatus.ATIVO: {
            StreamingStatus.INATIVO,
            StreamingStatus.BLOQUEADO,
            StreamingStatus.REMOVIDO,
        },
        StreamingStatus.BLOQUEADO: {
            StreamingStatus.INATIVO,
            StreamingStatus.REMOVIDO,
        },
        StreamingStatus.REMOVIDO: set(),
    }

    TERMINAL_STATES: set[StreamingStatus] = {StreamingStatus.REMOVIDO}

    # Operations narrower than their target state: turning off must not
    # unblock, and unblocking must not turn off
    OPERATION_SOURCES: dict[str, set[StreamingStatus]] = {
        "desligar": {StreamingStatus.ATIVO, StreamingStatus.INATIVO},
        "desbloquear": {StreamingStatus.BLOQUEADO},
    }

    @classmethod
    def can_transition(cls, current: StreamingStatus, new: StreamingStatus) -> bool:
        """Check if state transition is valid."""
        return new in cls.TRANSITIONS.get(current, set())

    @classmethod
    def is_terminal(cls, state: StreamingStatus) -> bool:
        return state in cls.TERMINAL_STATES

    @classmethod
    def accepts_request(
        cls,
        current: StreamingStatus,
        target: StreamingStatus,
        operation: str | None = None,
    ) -> bool:
        """Whether a request for `target` may be forwarded from `current`.

        Same-state requests are forwarded unless the entity is terminal.
        """
        if cls.is_terminal(current):
            return False
        sources = cls.OPERATION_SOURCES.get(operation) if operation else None
        if sources is not None and current not in sources:
            return False
        return current == target or cls.can_transition(current, target)

    @classmethod
    def get_valid_sources(cls, target: StreamingStatus) -> set[StreamingStatus]:
        """Get all states that can transition to the target state."""
        return {state for state, targets in cls.TRANSITIONS.items() if target in targets}
