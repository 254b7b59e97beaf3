"""
Lambda adapter shared by every API handler.

Wraps a handler body `func(event, services, actor)` with event logging, the
identity gate, the role check, error-to-status mapping and JSON formatting.
"""
import functools
from typing import Iterable, Optional

from .app import get_services
from .auth import authorize
from .errors import CoinCrafterError, ValidationError
from .logging import logger, log_event
from .schemas import parse_request
from .utils import format_response, get_path_param, parse_body


def api_handler(roles: Optional[Iterable[str]] = None, authenticate: bool = True, status: int = 200):
    """
    Args:
        roles: Roles allowed to call the handler (None = any authenticated user)
        authenticate: Resolve the caller to an account before running
        status: Status code of a successful response
    """
    def decorator(func):
        @functools.wraps(func)
        def handler(event, context):
            log_event(event)
            try:
                services = get_services()
                actor = None
                if authenticate:
                    actor = services.identity.authenticate(event)
                    if roles:
                        authorize(actor, roles)
                body = func(event, services, actor)
                return format_response(status, body)
            except CoinCrafterError as e:
                logger.warning(f"{func.__module__} failed with {e.status_code}: {e.message}")
                return format_response(e.status_code, {'error': e.message})
            except Exception as e:
                logger.exception(f"Unhandled error in {func.__module__}: {e}")
                return format_response(500, {'error': 'Internal Server Error'})
        return handler
    return decorator


def read_body(event: dict, schema):
    """Parse and validate the JSON body against a request schema."""
    return parse_request(schema, parse_body(event))


def require_path_param(event: dict, name: str) -> str:
    value = get_path_param(event, name)
    if not value:
        raise ValidationError(f'Missing path parameter {name}')
    return value
