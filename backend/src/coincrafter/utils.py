"""
Request and response helpers for the API handlers.
"""
import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from .config import config


class ApiJSONEncoder(json.JSONEncoder):
    """
    Encodes the values records carry: Decimal coin and dollar amounts from
    DynamoDB, and dates that were not already dumped as ISO strings.
    """

    def default(self, o):
        if isinstance(o, Decimal):
            # Whole coin counts stay integers; dollar amounts keep their cents
            return int(o) if o % 1 == 0 else float(o)
        if isinstance(o, (date, datetime)):
            return o.isoformat()
        return super().default(o)


def cors_headers() -> Dict[str, Any]:
    return {
        'Access-Control-Allow-Origin': config.CORS_ALLOW_ORIGIN,
        'Access-Control-Allow-Credentials': True,
        'Access-Control-Allow-Headers': 'Content-Type,Authorization',
        'Access-Control-Allow-Methods': 'GET,POST,PATCH,DELETE,OPTIONS',
    }


def format_response(status_code: int, body: Any, headers: Dict[str, str] = None) -> Dict[str, Any]:
    """API Gateway proxy response with a JSON body and CORS headers."""
    response_headers = {**cors_headers(), 'Content-Type': 'application/json'}
    response_headers.update(headers or {})
    return {
        'statusCode': status_code,
        'headers': response_headers,
        'body': json.dumps(body, cls=ApiJSONEncoder)
    }


def parse_body(event: dict) -> Optional[dict]:
    """
    Decoded JSON body of the event.

    Returns {} when the request has no body and None when the body is not
    valid JSON, so the caller can tell a missing body from a malformed one.
    """
    body = event.get('body')
    if body is None or body == '':
        return {}
    if not isinstance(body, str):
        return body
    try:
        return json.loads(body)
    except json.JSONDecodeError:
        return None


def get_path_param(event: dict, param_name: str) -> Optional[str]:
    return (event.get('pathParameters') or {}).get(param_name)


def get_query_param(event: dict, param_name: str, default: str = None) -> Optional[str]:
    return (event.get('queryStringParameters') or {}).get(param_name, default)
