# Entry point for the scheduled trigger (e.g. an EventBridge rule on cron(0 6,18 * * ? *))

import json
import os
import logging
import sys
from typing import Dict, Any

# Lambda deployment puts src/ under the task root; make the 'src' namespace importable
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.config import load_settings
from src.data_fetchers.fetcher_factory import create_fetcher
from src.notification_pipeline import run_pipeline, PipelineResult, ERROR_AGGREGATION, STATUS_ERROR, STATUS_NOTHING_DUE
from src.notifiers.webhook_notifier import WebhookNotifier


# --- Basic Lambda Logging Setup ---
log_level_str = os.environ.get('LOG_LEVEL', 'INFO').upper()
log_level = getattr(logging, log_level_str, logging.INFO)
logger = logging.getLogger(__name__)
if not logging.getLogger().hasHandlers():
     logging.basicConfig(level=log_level, stream=sys.stdout, format='%(levelname)s:%(name)s: %(message)s')
else: logger.setLevel(log_level)


# --- Helper Functions ---
def create_response(status_code: int, body: Dict[str, Any]) -> Dict[str, Any]:
    return {"statusCode": status_code, "headers": {"Content-Type": "application/json"}, "body": json.dumps(body)}

def create_error_response(status_code: int, message: str) -> Dict[str, Any]:
    logger.error(f"Returning error {status_code}: {message}")
    return create_response(status_code, {"error": message})

def response_for_result(result: PipelineResult) -> Dict[str, Any]:
    if result.status == STATUS_ERROR:
        # Bad feed content is our problem; fetch and webhook failures are upstream
        status_code = 500 if result.error_kind == ERROR_AGGREGATION else 502
        return create_error_response(status_code, f"{result.error_kind} error: {result.error}")
    if result.status == STATUS_NOTHING_DUE:
        return create_response(200, {"status": result.status, "message": "No bins due today or tomorrow"})
    return create_response(200, {"status": result.status, "message": result.message,
                                 "dueBins": [{"bin": b.name, "dueOn": b.due_on.value} for b in result.due_bins]})


# --- Lambda Handler ---
def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    handler_logger = logging.getLogger(f"{__name__}.lambda_handler")
    handler_logger.info(f"Received event: {json.dumps(event, default=str)}")
    event = event or {}

    # 1. Configuration
    try: settings = load_settings(use_dotenv=False)
    except ValueError as e: return create_error_response(500, f"Invalid configuration: {e}")
    dry_run = bool(event.get("dryRun", False))

    # 2. Create Fetcher (Cache is always OFF for Lambda)
    handler_logger.info(f"Using source '{settings.source}', cache: False")
    try: fetcher = create_fetcher(source=settings.source, use_cache=False, uprn=settings.uprn, feed_url=settings.feed_url)
    except ValueError as e: return create_error_response(400, f"Invalid configuration: {e}")

    notifier = WebhookNotifier(settings.webhook_url) if settings.webhook_url and not dry_run else None

    # 3. Run
    result = run_pipeline(fetcher, notifier, settings.now(), cutoff=settings.cutoff,
                          message_prefix=settings.message_prefix, dry_run=dry_run)
    handler_logger.info(f"Bin Bot has run: {result.status}")
    return response_for_result(result)

# Example local test block
if __name__ == '__main__':
    logger.info("Testing lambda handler locally (dry run, using environment variables)...")
    result = lambda_handler({"dryRun": True}, None)
    logger.info(json.dumps(result, indent=2))
