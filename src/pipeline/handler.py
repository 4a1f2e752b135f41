"""
Open311 Sync - Invocation Handler

AWS Lambda style entry point, suitable behind API Gateway or a scheduled
EventBridge rule. The event payload is ignored; every invocation runs one
full sync and reports the outcome as an HTTP-style response.
"""

from __future__ import annotations

import logging
from typing import Any

from src.pipeline.runner import run_pipeline
from src.shared.config import get_config
from src.shared.log_setup import configure_logging

logger = logging.getLogger(__name__)

SUCCESS_BODY = "Completed request successfully"
HEADERS = {"Content-Type": "text/plain"}


def _response(status_code: int, body: str) -> dict[str, Any]:
    return {"statusCode": status_code, "headers": dict(HEADERS), "body": body}


def lambda_handler(event: Any = None, context: Any = None) -> dict[str, Any]:
    """
    Run the sync and translate the result into a response.

    Returns:
        ``{"statusCode": 200, ...}`` when every stage completed, otherwise
        ``{"statusCode": 500, ...}`` naming the stage that failed
    """
    try:
        config = get_config()
        configure_logging(config)
    except Exception as e:
        logger.error(f"Could not load pipeline settings: {e}", exc_info=True)
        return _response(500, "Request failed during loading stage")

    result = run_pipeline(config=config)

    if not result.success:
        return _response(500, f"Request failed during {result.stage} stage")
    return _response(200, SUCCESS_BODY)
