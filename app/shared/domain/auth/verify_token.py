from typing import Any, Dict, Optional

import jwt
from fastapi import Request
from loguru import logger


def _bearer_token(request: Request) -> Optional[str]:
    auth_header = request.headers.get('authorization')
    if not auth_header:
        return None

    scheme, _, token = auth_header.partition(' ')
    if scheme.lower() != 'bearer' or not token.strip():
        return None
    return token.strip()


def verify_token(request: Request, secret: str, algorithm: str = 'HS256') -> Optional[Dict[str, Any]]:
    """
    Resolve the caller from `Authorization: Bearer <jwt>`.

    Returns `{user_id, role, login}` or None when the token is missing or invalid.
    Claims accepted: `id` or `codigo` (caller id), `type` or `tipo` (role),
    `usuario` (caller login).
    """
    # Do not log the token itself
    logger.debug('enter path={} method={}', request.url.path, request.method)
    token = _bearer_token(request)
    if not token:
        logger.debug('missing bearer token')
        return None

    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.PyJWTError as e:
        logger.debug('invalid token: {}', e)
        return None

    user_id = payload.get('id') or payload.get('codigo')
    try:
        user_id = int(user_id)
    except (TypeError, ValueError):
        logger.debug('token without a numeric caller id')
        return None

    return {
        'user_id': user_id,
        'role': payload.get('type') or payload.get('tipo'),
        'login': payload.get('usuario'),
    }
