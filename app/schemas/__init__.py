"""Beanie ODM schemas for MongoDB collections."""

from .global_config import GlobalConfig
from .init import init_beanie_odm
from .streaming import Server, StreamingEntity
from .streaming_state import StreamingStatus, TransmissionStatus, TransmissionType
from .transmission import Playlist, Transmission

__all__ = [
    "GlobalConfig",
    "Playlist",
    "Server",
    "StreamingEntity",
    "StreamingStatus",
    "Transmission",
    "TransmissionStatus",
    "TransmissionType",
    "init_beanie_odm",
]
