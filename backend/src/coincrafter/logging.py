"""
Platform logger and request logging for the API handlers.

Events are logged as a request summary only. Bodies carry account numbers
and payment data, headers carry bearer tokens and the authorizer context
carries identity claims, so none of them reach the log.
"""
import json
import logging

LOGGER_NAME = 'coincrafter'

# Event keys copied into the request summary
EVENT_FIELDS = ('resource', 'httpMethod', 'path', 'pathParameters', 'queryStringParameters')

# requestContext keys copied into the request summary
CONTEXT_FIELDS = ('requestId', 'stage', 'routeKey')

logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.INFO)

if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    ))
    logger.addHandler(handler)


def summarize_event(event: dict) -> dict:
    """The loggable part of an API Gateway proxy event."""
    summary = {name: event[name] for name in EVENT_FIELDS if event.get(name) is not None}
    context = event.get('requestContext') or {}
    if isinstance(context, dict):
        summary.update({name: context[name] for name in CONTEXT_FIELDS if context.get(name)})
        http = context.get('http')
        if isinstance(http, dict) and http.get('method') and 'httpMethod' not in summary:
            summary['httpMethod'] = http['method']
    return summary


def log_event(event: dict) -> None:
    try:
        logger.info(f"Request: {json.dumps(summarize_event(event), default=str)}")
    except (TypeError, ValueError, AttributeError) as e:
        logger.warning(f"Could not log event: {e}")
