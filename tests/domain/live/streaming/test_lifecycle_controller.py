"""Tests for StreamingLifecycleController."""

import pytest

from app.domain.live.streaming.streaming_domain import StreamingLifecycleController
from app.domain.live.streaming.streaming_models import StreamingEntityRecord
from app.schemas import StreamingStatus
from app.services.integrations.streaming_control_schemas import ControlResult
from app.utils.app_errors import (
    AppErrorCode,
    AuthorizationError,
    NotFoundError,
    OperationError,
    TerminalStateError,
    ValidationError,
)
from tests.fixtures.fakes import FakeStreamingControl, InMemoryStreamingStore


def _entity(login: str = "user1", status: StreamingStatus = StreamingStatus.INATIVO) -> StreamingEntityRecord:
    return StreamingEntityRecord(login=login, owner_id=7, server_id=2, status=status)


@pytest.fixture
def store() -> InMemoryStreamingStore:
    return InMemoryStreamingStore([_entity()])


@pytest.fixture
def control() -> FakeStreamingControl:
    return FakeStreamingControl()


@pytest.fixture
def controller(store, control) -> StreamingLifecycleController:
    return StreamingLifecycleController(store=store, control=control)


class TestTurnOn:
    async def test_turn_on_inactive(self, controller, store, control):
        result = await controller.turn_on("user1")

        assert result.success is True
        assert result.already_active is None
        assert result.status == StreamingStatus.ATIVO
        assert store.entities["user1"].status == StreamingStatus.ATIVO
        assert control.calls == [("ligar", "user1")]

    async def test_turn_on_twice_is_idempotent_noop(self, controller, store):
        await controller.turn_on("user1")
        writes_after_first = list(store.status_writes)

        result = await controller.turn_on("user1")

        assert result.success is True
        assert result.already_active is True
        assert result.model_dump(by_alias=True, exclude_none=True)["alreadyActive"] is True
        assert store.status_writes == writes_after_first
        assert store.entities["user1"].status == StreamingStatus.ATIVO

    @pytest.mark.parametrize("login", [None, "", "   "])
    async def test_missing_login(self, controller, control, login):
        with pytest.raises(ValidationError):
            await controller.turn_on(login)
        assert control.calls == []

    async def test_unknown_login(self, controller, control):
        with pytest.raises(NotFoundError) as exc_info:
            await controller.turn_on("ghost")
        assert exc_info.value.status_code == 404
        assert control.calls == []

    async def test_control_rejection_is_operation_error(self, controller, store, control):
        async def reject(login):
            return ControlResult(success=False, message="encoder offline", node="srv-2")

        control.ligar = reject

        with pytest.raises(OperationError) as exc_info:
            await controller.turn_on("user1")

        assert exc_info.value.status_code == 500
        assert exc_info.value.errmesg == "encoder offline"
        assert exc_info.value.details["node"] == "srv-2"
        assert store.status_writes == []

    async def test_control_exception_echoes_message(self, controller, store, control):
        control.error = RuntimeError("connection refused")

        with pytest.raises(OperationError) as exc_info:
            await controller.turn_on("user1")

        assert exc_info.value.error == "connection refused"
        assert store.status_writes == []


class TestTurnOff:
    async def test_turn_off_active(self, store, control):
        store.entities["user1"].status = StreamingStatus.ATIVO
        control.states["user1"] = StreamingStatus.ATIVO
        controller = StreamingLifecycleController(store=store, control=control)

        result = await controller.turn_off("user1")

        assert result.success is True
        assert result.already_inactive is None
        assert store.entities["user1"].status == StreamingStatus.INATIVO

    async def test_turn_off_inactive_is_idempotent_noop(self, controller, store):
        result = await controller.turn_off("user1")

        assert result.success is True
        assert result.already_inactive is True
        assert store.status_writes == []

    async def test_turn_off_blocked_is_rejected(self, controller, store, control):
        store.entities["user1"].status = StreamingStatus.BLOQUEADO

        with pytest.raises(OperationError) as exc_info:
            await controller.turn_off("user1")

        assert exc_info.value.errcode == AppErrorCode.E_INVALID_TRANSITION.value
        assert store.entities["user1"].status == StreamingStatus.BLOQUEADO
        assert control.calls == []


class TestRestart:
    async def test_restart_active(self, store, control):
        store.entities["user1"].status = StreamingStatus.ATIVO
        control.states["user1"] = StreamingStatus.ATIVO
        controller = StreamingLifecycleController(store=store, control=control)

        result = await controller.restart("user1")

        assert result.success is True
        assert result.status == StreamingStatus.ATIVO

    async def test_restart_inactive_fails(self, controller, store):
        """No 'already' branch on restart: a stopped entity cannot be restarted."""
        with pytest.raises(OperationError):
            await controller.restart("user1")
        assert store.entities["user1"].status == StreamingStatus.INATIVO


class TestDestructiveOperations:
    @pytest.mark.parametrize("role", ["admin", "revenda"])
    async def test_block(self, controller, store, role):
        result = await controller.block("user1", role)

        assert result.success is True
        assert store.entities["user1"].status == StreamingStatus.BLOQUEADO

    async def test_unblock(self, controller, store):
        await controller.block("user1", "admin")

        result = await controller.unblock("user1", "revenda")

        assert result.success is True
        assert store.entities["user1"].status == StreamingStatus.INATIVO

    async def test_remove(self, controller, store):
        result = await controller.remove("user1", "admin")

        assert result.success is True
        # Row is kept with a terminal status
        assert store.entities["user1"].status == StreamingStatus.REMOVIDO

    @pytest.mark.parametrize("role", ["cliente", "streaming", "", None])
    @pytest.mark.parametrize("status", list(StreamingStatus))
    async def test_unauthorized_roles_never_touch_entity(self, store, control, role, status):
        store.entities["user1"].status = status
        controller = StreamingLifecycleController(store=store, control=control)

        for operation in (controller.block, controller.unblock, controller.remove):
            with pytest.raises(AuthorizationError) as exc_info:
                await operation("user1", role)
            assert exc_info.value.status_code == 403

        assert store.entities["user1"].status == status
        assert store.status_writes == []
        assert control.calls == []

    async def test_missing_login_checked_before_role(self, controller):
        with pytest.raises(ValidationError):
            await controller.block(None, "cliente")


class TestRemovedIsTerminal:
    @pytest.fixture
    def removed_store(self) -> InMemoryStreamingStore:
        return InMemoryStreamingStore([_entity(status=StreamingStatus.REMOVIDO)])

    async def test_every_operation_fails_with_terminal_state(self, removed_store, control):
        controller = StreamingLifecycleController(store=removed_store, control=control)
        operations = [
            lambda: controller.turn_on("user1"),
            lambda: controller.turn_off("user1"),
            lambda: controller.restart("user1"),
            lambda: controller.block("user1", "admin"),
            lambda: controller.unblock("user1", "admin"),
            lambda: controller.remove("user1", "admin"),
        ]

        for operation in operations:
            with pytest.raises(TerminalStateError) as exc_info:
                await operation()
            assert exc_info.value.status_code == 409
            assert exc_info.value.errcode == AppErrorCode.E_TERMINAL_STATE.value

        assert removed_store.entities["user1"].status == StreamingStatus.REMOVIDO
        assert control.calls == []

    async def test_status_write_never_overwrites_removed(self, removed_store):
        assert await removed_store.update_status("user1", StreamingStatus.ATIVO) is False
        assert removed_store.entities["user1"].status == StreamingStatus.REMOVIDO
