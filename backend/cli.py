import argparse
import asyncio
import json
import logging
import sys

from application.sync import RunStatus
from backend.container import build_container
from backend.settings import get_settings
from domain.models import SyncFamily

logger = logging.getLogger(__name__)


async def _sync(container, families, force: bool) -> int:
    scheduler = container.scheduler
    exit_code = 0

    for family in families:
        if force:
            outcome = await scheduler.force_sync(family)
        else:
            outcome = await scheduler.sync_if_needed(family)

        if outcome.status == RunStatus.RETRY_SCHEDULED:
            print(f"{family.value}: retrying in {container.settings.retry_delay_seconds:.0f}s ({outcome.error})")
            outcome = await outcome.wait()

        print(json.dumps(outcome.to_dict()))
        if outcome.status == RunStatus.FAILED:
            exit_code = 1

    await container.coordinator.drain()
    return exit_code


async def _status(container) -> int:
    report = await container.scheduler.status()
    for family, state in report.items():
        last_sync = state["last_sync"].isoformat() if state["last_sync"] else "never"
        print(f"{family.value:15} last sync: {last_sync}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description="Mirror the remote workout store onto the local cache")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser("sync", help="Run sync passes")
    sync_parser.add_argument(
        "--family",
        choices=[f.value for f in SyncFamily],
        help="Only sync this family (default: all)",
    )
    sync_parser.add_argument(
        "--force",
        action="store_true",
        help="Sync even if the family is up to date",
    )

    subparsers.add_parser("status", help="Show last successful sync per family")

    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not settings.athlete_id:
        print("Error: ATHLETE_ID is not configured", file=sys.stderr)
        sys.exit(2)

    container = build_container(settings)

    try:
        if args.command == "sync":
            families = [SyncFamily(args.family)] if args.family else container.scheduler.families
            exit_code = asyncio.run(_sync(container, families, args.force))
        else:
            exit_code = asyncio.run(_status(container))
    except KeyboardInterrupt:
        print("Interrupted", file=sys.stderr)
        sys.exit(130)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
