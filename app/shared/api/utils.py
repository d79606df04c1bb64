from functools import lru_cache
from importlib import import_module
from os import environ
from pathlib import Path
from typing import Any, Literal
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field
from redis.asyncio import Redis

from app.utils.app_errors import AppError, AppErrorCode

from ..config import config

REDIS_MAJOR_LABEL = "stream_major"


def format_error(ex: BaseException) -> str:
    try:
        from traceback import TracebackException
        return ''.join(TracebackException.from_exception(ex).format())
    except Exception:
        import traceback
        return ''.join(traceback.format_exception(type(ex), ex, ex.__traceback__))


class ApiResponse(BaseModel):
    version: str | None = Field(default_factory=lambda: environ.get('BUILD_COMMIT', 'dev'))


class ApiSuccess(ApiResponse):
    success: Literal[True] = True
    results: Any = "OK"


class ApiFailure(BaseModel):
    """Failure envelope: `message` summarizes, `error` echoes the underlying failure."""

    model_config = ConfigDict(extra='allow')

    success: Literal[False] = False
    errcode: str = AppErrorCode.E_INTERNAL_ERROR.value
    erresid: str = Field(default_factory=lambda: uuid4().hex[:10])
    message: str = 'We are sorry, an error occurred.'
    error: str | None = None


def api_failure(errcode: str | None = None, errmesg: Exception | str | None = None, *, trace: Any = None):
    import inspect

    if not errcode:
        errcode = ApiFailure.model_fields['errcode'].default

    error = None
    if isinstance(errmesg, Exception):
        error = str(errmesg)
        errmesg = format_error(errmesg)

    if not errmesg:
        errmesg = ApiFailure.model_fields['message'].default

    failure = ApiFailure(errcode=errcode, message=errmesg, error=error or errmesg)

    caller_frame = inspect.stack()[1]
    module = inspect.getmodule(caller_frame.frame)
    module_name = module.__name__ if module and getattr(module, "__name__", None) else caller_frame.filename
    caller_info = f"{module_name}:{caller_frame.function}:{caller_frame.lineno}"

    logger.warning(
        f'{failure.errcode} {failure.erresid}\n{failure.message} '
        f'caller={caller_info} trace={trace}'
    )

    return failure


def failure_from_error(exc: AppError) -> ApiFailure:
    # Collaborator payload first so the envelope fields always win
    payload = {**exc.details}
    payload.update(
        success=False,
        errcode=exc.errcode,
        erresid=exc.erresid,
        message=exc.errmesg,
        error=exc.error,
    )
    return ApiFailure(**payload)


def make_response(results, *, status_code: int | None = None):
    if isinstance(results, Exception):
        failure = api_failure(errmesg=results)
        return ORJSONResponse(status_code=status_code or 500, content=failure.model_dump())

    if isinstance(results, ApiFailure):
        content = results.model_dump()
        if status_code is None:
            status_code = 500 if results.errcode == AppErrorCode.E_INTERNAL_ERROR.value else 400
    else:
        content = results.model_dump(by_alias=True) if isinstance(results, BaseModel) else results
        if status_code is None:
            status_code = 200

    return ORJSONResponse(status_code=status_code, content=content)


ROUTE_FOLDERS = ('api/v1/routers', 'shared/api')


def load_routes(app: FastAPI, prefix: str):
    app_root = Path(__file__).parent.parent.parent
    for folder in ROUTE_FOLDERS:
        load_routes_in_folder(app, prefix if folder.startswith('api') else '', app_root / folder)

    for route_info in get_all_routes_info(app):
        methods = ','.join(sorted(route_info['methods']))
        logger.info('Loaded route: {:<12} {:<60} {}', methods, route_info['path'], route_info['endpoint'])


def load_routes_in_folder(app: FastAPI, prefix: str, folder: Path):
    disabled_routes = [x.strip() for x in config.get('API_DISABLED', '').split(',') if x.strip()]
    logger.debug('disabled routes: {}', disabled_routes)

    app_root = Path(__file__).parent.parent.parent
    for x in sorted(folder.glob('*.py')):
        if x.name == '__init__.py':
            continue

        relative_path = x.relative_to(app_root)
        name = 'app.' + str(relative_path).replace('/', '.').replace('\\', '.')[:-3]
        if any(f'.{disabled_route}' in name for disabled_route in disabled_routes):
            logger.warning('disabled route module {}', name)
            continue

        module = import_module(name)
        if hasattr(module, "router"):
            app.include_router(module.router, prefix=prefix)
            logger.info('Added routes in {}', name)


def get_all_routes_info(app: FastAPI):
    routes_info = []

    for route in app.routes:
        if hasattr(route, 'methods'):
            endpoint_name = route.endpoint.__name__ if hasattr(route.endpoint, '__name__') else str(route.endpoint)
            routes_info.append(
                {
                    "methods": sorted(route.methods),
                    "path": route.path,
                    "name": route.name,
                    "endpoint": endpoint_name,
                }
            )

    return routes_info


@lru_cache
def get_worker_info():
    project_root = Path(__file__).parent.parent.parent.parent
    worker_name = environ.get('WORKER_NAME', project_root.name)

    parts = environ.get('BUILD_COMMIT', '').split('-')
    commit_id = parts[1] if len(parts) > 1 else 'dev'

    return worker_name, commit_id, uuid4().hex[:8]


def init_logger():
    import sys

    logger.remove()

    worker_name, commit_id, _ = get_worker_info()

    if config.get_flag('DEBUG'):
        logger_level = 'DEBUG'
        logger_format = (
            f'<yellow>{worker_name}:{commit_id}</yellow> | '
            '<green>{time:MM-DD HH:mm:ss.SSS}</green> | '
            '<level>{level: <8}</level> | '
            '<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | '
            '<level>{message}</level>'
        )
    else:
        logger_level = 'INFO'
        logger_format = (
            f'{worker_name}:{commit_id} | '
            '{time:MM-DD HH:mm:ss.SSS} | '
            '{level: <8} | '
            '{name}:{function}:{line} | '
            '{message}'
        )
    logger.add(sys.stderr, level=logger_level, format=logger_format)


def get_redis_major_client(request: Request) -> Redis:
    return request.app.state.redis_manager.get_client(REDIS_MAJOR_LABEL)
