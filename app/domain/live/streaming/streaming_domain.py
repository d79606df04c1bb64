"""Streaming entity lifecycle: authorize, sequence and record on/off/block/remove."""

from collections.abc import Awaitable, Callable

from loguru import logger

from app.domain.utils.authz import DESTRUCTIVE_ROLES, authorize
from app.schemas import StreamingStatus
from app.services.integrations.streaming_control_schemas import ControlResult
from app.services.integrations.streaming_control_service import StreamingControlService
from app.utils.app_errors import (
    AppError,
    AppErrorCode,
    NotFoundError,
    OperationError,
    TerminalStateError,
    ValidationError,
)

from ._store import StreamingStore
from .streaming_models import StreamingEntityRecord, TransitionResult
from .streaming_state_machine import StreamingStateMachine


def require_login(login: str | None) -> str:
    """Validate the streaming login shared by every lifecycle operation."""
    if not login or not str(login).strip():
        raise ValidationError(errmesg="Streaming login is required")
    return str(login).strip()


class StreamingLifecycleController:
    """Forwards lifecycle intents to the streaming control service.

    Order of checks for every operation: login present, caller role (for
    destructive operations), entity exists, entity not terminal, transition
    allowed. Only then is the control service called, and only a successful
    call changes the stored status.
    """

    def __init__(self, store: StreamingStore, control: StreamingControlService):
        self._store = store
        self._control = control

    async def turn_on(self, login: str | None) -> TransitionResult:
        login = require_login(login)
        await self._load_for_transition(login, StreamingStatus.ATIVO, "ligar")

        result = await self._call(login, "ligar", lambda: self._control.ligar(login))
        if result.success:
            return await self._record(login, StreamingStatus.ATIVO, result)
        if result.already_active:
            logger.info("Streaming {} already active, nothing to do", login)
            return TransitionResult(
                message=result.message or "Streaming is already active",
                status=StreamingStatus.ATIVO,
                already_active=True,
            )
        raise self._rejected(login, "ligar", result)

    async def turn_off(self, login: str | None) -> TransitionResult:
        login = require_login(login)
        await self._load_for_transition(login, StreamingStatus.INATIVO, "desligar")

        result = await self._call(login, "desligar", lambda: self._control.desligar(login))
        if result.success:
            return await self._record(login, StreamingStatus.INATIVO, result)
        if result.already_inactive:
            logger.info("Streaming {} already inactive, nothing to do", login)
            return TransitionResult(
                message=result.message or "Streaming is already inactive",
                status=StreamingStatus.INATIVO,
                already_inactive=True,
            )
        raise self._rejected(login, "desligar", result)

    async def restart(self, login: str | None) -> TransitionResult:
        # No idempotent branch: restarting a stopped entity is a control-service failure
        login = require_login(login)
        await self._load_for_transition(login, StreamingStatus.ATIVO, "reiniciar")

        result = await self._call(login, "reiniciar", lambda: self._control.reiniciar(login))
        if not result.success:
            raise self._rejected(login, "reiniciar", result)
        return await self._record(login, StreamingStatus.ATIVO, result)

    async def block(self, login: str | None, caller_role: str | None) -> TransitionResult:
        login = require_login(login)
        authorize(caller_role, DESTRUCTIVE_ROLES)
        return await self._destructive(
            login, StreamingStatus.BLOQUEADO, "bloquear", lambda: self._control.bloquear(login, caller_role)
        )

    async def unblock(self, login: str | None, caller_role: str | None) -> TransitionResult:
        login = require_login(login)
        authorize(caller_role, DESTRUCTIVE_ROLES)
        return await self._destructive(
            login, StreamingStatus.INATIVO, "desbloquear", lambda: self._control.desbloquear(login, caller_role)
        )

    async def remove(self, login: str | None, caller_role: str | None) -> TransitionResult:
        login = require_login(login)
        authorize(caller_role, DESTRUCTIVE_ROLES)
        return await self._destructive(
            login, StreamingStatus.REMOVIDO, "remover", lambda: self._control.remover(login, caller_role)
        )

    async def _destructive(
        self,
        login: str,
        target: StreamingStatus,
        action: str,
        call: Callable[[], Awaitable[ControlResult]],
    ) -> TransitionResult:
        await self._load_for_transition(login, target, action)

        result = await self._call(login, action, call)
        if not result.success:
            raise self._rejected(login, action, result)
        return await self._record(login, target, result)

    async def _load_for_transition(
        self, login: str, target: StreamingStatus, action: str
    ) -> StreamingEntityRecord:
        entity = await self._store.get_by_login(login)
        if entity is None:
            raise NotFoundError(errmesg=f"Streaming not found: {login}")

        if StreamingStateMachine.is_terminal(entity.status):
            raise TerminalStateError(
                errmesg=f"Streaming {login} was removed; no further operations are allowed",
                details={"status": entity.status.value},
            )

        if not StreamingStateMachine.accepts_request(entity.status, target, action):
            raise OperationError(
                errcode=AppErrorCode.E_INVALID_TRANSITION,
                errmesg=f"Invalid state transition: {entity.status} -> {target}",
                details={"status": entity.status.value},
            )

        return entity

    async def _call(
        self,
        login: str,
        action: str,
        call: Callable[[], Awaitable[ControlResult]],
    ) -> ControlResult:
        try:
            return await call()
        except AppError:
            raise
        except Exception as e:
            logger.error("Streaming control {} failed for {}: {!r}", action, login, e)
            raise OperationError(
                errmesg=f"Internal error on streaming control '{action}'",
                error=str(e),
            ) from e

    def _rejected(self, login: str, action: str, result: ControlResult) -> OperationError:
        logger.warning("Streaming control rejected {} for {}: {}", action, login, result.message)
        return OperationError(
            errmesg=result.message or f"Streaming control '{action}' failed",
            details=result.model_dump(by_alias=True, exclude={"success"}, exclude_none=True),
        )

    async def _record(
        self,
        login: str,
        status: StreamingStatus,
        result: ControlResult,
    ) -> TransitionResult:
        changed = await self._store.update_status(login, status)
        if changed:
            logger.info("Streaming {} status updated to {}", login, status)
        else:
            # Concurrent removal or an unchanged status (restart)
            logger.debug("Streaming {} status write matched no change (target {})", login, status)
        return TransitionResult(message=result.message, status=status)
