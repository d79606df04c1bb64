"""Common enums used across schemas."""

from enum import Enum


class StreamingStatus(str, Enum):
    """Streaming entity (egress channel) status.

    INATIVO ⇄ ATIVO, either → BLOQUEADO → INATIVO, any → REMOVIDO.
    REMOVIDO is terminal: the row is kept, no further transitions.
    """

    INATIVO = "inativo"
    ATIVO = "ativo"
    BLOQUEADO = "bloqueado"
    REMOVIDO = "removido"

    def __str__(self) -> str:
        return self.value


class TransmissionStatus(str, Enum):
    """Transmission session status. FINALIZADA rows are never mutated."""

    ATIVA = "ativa"
    FINALIZADA = "finalizada"

    def __str__(self) -> str:
        return self.value


class TransmissionType(str, Enum):
    PLAYLIST = "playlist"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value


__all__ = ["StreamingStatus", "TransmissionStatus", "TransmissionType"]
