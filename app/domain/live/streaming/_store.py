"""Streaming entity persistence."""

from typing import Any, Protocol

from beanie.odm.operators.update.general import Set
from beanie.operators import In
from pymongo.errors import PyMongoError

from app.domain.utils.clock import utc_now
from app.schemas import GlobalConfig, Server, StreamingEntity, StreamingStatus
from app.utils.app_errors import AppErrorCode, OperationError

from .streaming_models import StreamingEntityRecord, StreamingEntityView


class StreamingStore(Protocol):
    async def get_by_login(self, login: str) -> StreamingEntityRecord | None: ...

    async def update_status(self, login: str, status: StreamingStatus) -> bool:
        """Persist `status` unless the entity is already terminal. Returns whether a row changed."""
        ...

    async def list_for_owner(self, owner_id: int) -> list[StreamingEntityView]: ...

    async def get_server_id_for_owner(self, owner_id: int) -> int | None: ...

    async def get_global_config(self) -> dict[str, Any] | None: ...


def _to_record(doc: StreamingEntity) -> StreamingEntityRecord:
    return StreamingEntityRecord(
        login=doc.login,
        owner_id=doc.owner_id,
        server_id=doc.server_id,
        status=doc.status,
    )


def _persistence_error(action: str, exc: PyMongoError) -> OperationError:
    return OperationError(
        errcode=AppErrorCode.E_PERSISTENCE_FAILED,
        errmesg=f"Failed to {action}",
        error=str(exc),
    )


class BeanieStreamingStore:
    """StreamingStore backed by the `streamings` and `servidores` collections."""

    async def get_by_login(self, login: str) -> StreamingEntityRecord | None:
        try:
            doc = await StreamingEntity.find_one(StreamingEntity.login == login)
        except PyMongoError as e:
            raise _persistence_error("load streaming", e) from e
        return _to_record(doc) if doc else None

    async def update_status(self, login: str, status: StreamingStatus) -> bool:
        try:
            result = await StreamingEntity.find(
                StreamingEntity.login == login,
                StreamingEntity.status != StreamingStatus.REMOVIDO,
            ).update(
                Set({StreamingEntity.status: status, StreamingEntity.updated_at: utc_now()})
            )
        except PyMongoError as e:
            raise _persistence_error("update streaming status", e) from e
        return bool(result and result.modified_count > 0)

    async def list_for_owner(self, owner_id: int) -> list[StreamingEntityView]:
        try:
            docs = await StreamingEntity.find(
                StreamingEntity.owner_id == owner_id,
            ).sort("+login").to_list()

            server_ids = sorted({doc.server_id for doc in docs})
            servers = await Server.find(In(Server.server_id, server_ids)).to_list() if server_ids else []
        except PyMongoError as e:
            raise _persistence_error("list streamings", e) from e

        servers_by_id = {server.server_id: server for server in servers}
        views = []
        for doc in docs:
            server = servers_by_id.get(doc.server_id)
            views.append(
                StreamingEntityView(
                    **_to_record(doc).model_dump(),
                    server_name=server.name if server else None,
                    server_status=server.status if server else None,
                )
            )
        return views

    async def get_server_id_for_owner(self, owner_id: int) -> int | None:
        try:
            doc = await StreamingEntity.find(
                StreamingEntity.owner_id == owner_id,
            ).sort("+login").first_or_none()
        except PyMongoError as e:
            raise _persistence_error("resolve owner server", e) from e
        return doc.server_id if doc else None

    async def get_global_config(self) -> dict[str, Any] | None:
        try:
            doc = await GlobalConfig.find_one({})
        except PyMongoError as e:
            raise _persistence_error("load global config", e) from e
        if doc is None:
            return None
        return doc.model_dump(mode="json", exclude={"id", "revision_id"})
