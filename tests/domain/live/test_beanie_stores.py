"""Beanie store tests against a real MongoDB (skipped unless MONGO_URL_STREAM_PRIMARY is set)."""

from datetime import datetime, timezone

import pytest

from app.domain.live.streaming._store import BeanieStreamingStore
from app.domain.live.transmission._store import BeanieTransmissionStore
from app.domain.live.transmission.transmission_models import TransmissionRecord
from app.schemas import (
    GlobalConfig,
    Playlist,
    Server,
    StreamingEntity,
    StreamingStatus,
    Transmission,
    TransmissionStatus,
)
from app.utils.app_errors import OperationError

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _record(transmission_id: str, owner_id: int = 42) -> TransmissionRecord:
    return TransmissionRecord(
        transmission_id=transmission_id,
        owner_id=owner_id,
        title="Live",
        playlist_id=5,
        started_at=NOW,
    )


@pytest.mark.usefixtures("clear_collections")
class TestBeanieStreamingStore:
    @pytest.fixture
    def store(self) -> BeanieStreamingStore:
        return BeanieStreamingStore()

    async def test_update_status_never_overwrites_removed(self, beanie_db, store):
        await StreamingEntity(login="gone", owner_id=1, server_id=1, status=StreamingStatus.REMOVIDO).insert()
        await StreamingEntity(login="live", owner_id=1, server_id=1).insert()

        assert await store.update_status("gone", StreamingStatus.ATIVO) is False
        assert await store.update_status("live", StreamingStatus.ATIVO) is True

        assert (await store.get_by_login("gone")).status == StreamingStatus.REMOVIDO
        assert (await store.get_by_login("live")).status == StreamingStatus.ATIVO

    async def test_list_for_owner_joins_server(self, beanie_db, store):
        await Server(server_id=1, name="Server A", status="online").insert()
        await StreamingEntity(login="zeta", owner_id=1, server_id=1).insert()
        await StreamingEntity(login="alpha", owner_id=1, server_id=2).insert()
        await StreamingEntity(login="other", owner_id=2, server_id=1).insert()

        views = await store.list_for_owner(1)

        assert [v.login for v in views] == ["alpha", "zeta"]
        assert views[0].server_name is None
        assert views[1].server_name == "Server A"
        assert await store.get_server_id_for_owner(1) == 2
        assert await store.get_server_id_for_owner(99) is None

    async def test_global_config(self, beanie_db, store):
        assert await store.get_global_config() is None

        await GlobalConfig.get_pymongo_collection().insert_one({"limite_ouvintes": 100})

        assert (await store.get_global_config())["limite_ouvintes"] == 100


@pytest.mark.usefixtures("clear_collections")
class TestBeanieTransmissionStore:
    @pytest.fixture
    def store(self) -> BeanieTransmissionStore:
        return BeanieTransmissionStore()

    async def test_partial_unique_index_rejects_second_active(self, beanie_db, store):
        await store.create(_record("tx_a"))

        with pytest.raises(OperationError):
            await store.create(_record("tx_b"))

        # Other owners and finalized rows are unaffected
        await store.create(_record("tx_c", owner_id=43))
        assert await store.finalize("tx_a", NOW) is True
        await store.create(_record("tx_b"))

    async def test_finalize_active_hands_off(self, beanie_db, store):
        await store.create(_record("tx_a"))

        finalized = await store.finalize_active(42, ended_at=NOW)

        assert finalized.transmission_id == "tx_a"
        assert finalized.status == TransmissionStatus.FINALIZADA
        assert await store.get_active(42) is None
        assert await store.finalize_active(42, ended_at=NOW) is None

    async def test_finalize_only_moves_active_rows(self, beanie_db, store):
        await store.create(_record("tx_a"))
        assert await store.finalize("tx_a", NOW) is True

        later = datetime(2026, 4, 1, tzinfo=timezone.utc)
        assert await store.finalize("tx_a", later) is False

        doc = await Transmission.find_one(Transmission.transmission_id == "tx_a")
        assert doc.ended_at.replace(tzinfo=timezone.utc) == NOW

    async def test_get_playlist_checks_owner(self, beanie_db, store):
        await Playlist(playlist_id=5, owner_id=42, name="Morning").insert()

        assert (await store.get_playlist(5, 42)).name == "Morning"
        assert await store.get_playlist(5, 43) is None
