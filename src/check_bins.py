import logging
import sys
import argparse
import json
import os

# Use absolute imports from the 'src' package namespace
from src.config import load_settings
from src.data_fetchers.fetcher_factory import create_fetcher
from src.bin_aggregator import build_report
from src.due_classifier import parse_cutoff
from src.exceptions import AggregationError, FeedFetchError
from src.notification_pipeline import run_pipeline, STATUS_DRY_RUN, STATUS_NOTHING_DUE, STATUS_SENT
from src.notifiers.webhook_notifier import WebhookNotifier

project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
LOG_FILE = os.path.join(project_root, 'error.log')
log_configured = False
if not log_configured: # Simplified logging setup
    log_dir = os.path.dirname(LOG_FILE); os.makedirs(log_dir, exist_ok=True)
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(name)s - %(message)s', filename=LOG_FILE, filemode='a')
    console_handler = logging.StreamHandler(sys.stderr); console_handler.setLevel(logging.INFO)
    formatter = logging.Formatter('%(levelname)s: %(message)s'); console_handler.setFormatter(formatter)
    if not logging.getLogger('').hasHandlers(): logging.getLogger('').addHandler(console_handler)
    log_configured = True
logger = logging.getLogger(__name__)


def _cutoff_arg(value: str):
    try:
        return parse_cutoff(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def main(argv=None):
    parser = argparse.ArgumentParser(description="Check which bins are due today or tomorrow and send a notification.")
    parser.add_argument("--uprn", "-u", help="Property reference (Defaults to BIN_UPRN env var).")
    parser.add_argument("--use-cache", "-c", action="store_true", help="Enable feed cache usage. Default is OFF.")
    parser.set_defaults(use_cache=False)
    parser.add_argument("--dry-run", "-d", action="store_true", help="Print the notification instead of sending it.")
    parser.add_argument("--report", "-r", action="store_true", help="Print every bin's status as JSON and exit without notifying.")
    parser.add_argument("--cutoff", type=_cutoff_arg, help="Time (HH:MM) after which today's collection is treated as done (Defaults to BIN_CUTOFF_TIME or 21:11).")
    parser.add_argument("--source", choices=["newport"], help="Data source (Defaults to FETCHER_SOURCE or newport).")
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}", exc_info=True); print(f"ERROR: {e}", file=sys.stderr); sys.exit(1)

    # Command line arguments take priority over the environment
    if args.uprn: settings.uprn = args.uprn
    if args.cutoff is not None: settings.cutoff = args.cutoff
    if args.source: settings.source = args.source

    cache_status = "enabled" if args.use_cache else "disabled"
    logger.info(f"Checking bins for UPRN '{settings.uprn}' using source '{settings.source}' (Cache: {cache_status})")
    try:
        fetcher = create_fetcher(source=settings.source, use_cache=args.use_cache, uprn=settings.uprn,
                                 feed_url=settings.feed_url, cache_max_age=settings.cache_max_age)
    except ValueError as e:
        logger.error(f"Fetcher creation failed: {e}", exc_info=True); print(f"ERROR: {e}", file=sys.stderr); sys.exit(1)

    now = settings.now()

    if args.report:
        try:
            feed = fetcher.get_collection_entries()
            report = build_report(feed.entries, now, settings.cutoff)
        except (FeedFetchError, AggregationError) as e:
            logger.error(f"Could not build bin report: {e}", exc_info=True)
            print(f"\nERROR: Could not build bin report. Check {LOG_FILE}.", file=sys.stderr)
            sys.exit(1)
        print(json.dumps(report.as_dict(), indent=4))
        return

    notifier = None
    if settings.webhook_url and not args.dry_run:
        notifier = WebhookNotifier(settings.webhook_url)

    result = run_pipeline(fetcher, notifier, now, cutoff=settings.cutoff,
                          message_prefix=settings.message_prefix, dry_run=args.dry_run)

    if result.status == STATUS_NOTHING_DUE:
        print("No bins due today or tomorrow.")
    elif result.status in (STATUS_SENT, STATUS_DRY_RUN):
        print(result.message)
    else:
        print(f"\nERROR: Bin check failed ({result.error_kind}): {result.error}. Check {LOG_FILE}.", file=sys.stderr)
        sys.exit(1)

    logger.info("Check complete.")


if __name__ == "__main__":
    main()
