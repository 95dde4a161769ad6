#!/usr/bin/env python3
"""
Manual RSS fetch.

Usage:
    python run_fetch.py              # all active journals
    python run_fetch.py <journal_id> # one journal (active or not)
"""

import argparse
import sys

from journalfeed.database.db.session import engine
from journalfeed.database.fetch_log_repository import FetchLogRepository
from journalfeed.errors import JournalFeedError
from journalfeed.logger import setup_logging
from journalfeed.model.run_result import JournalFetchResult, RunResult
from journalfeed.scheduler.fetch_runner import FetchRunner


def print_journal_result(result: JournalFetchResult) -> None:
    print(f"Success: {result.success}")
    print(f"Papers fetched: {result.papers_fetched}")
    print(f"New papers: {result.new_papers}")
    if result.error:
        print(f"Error: {result.error}")


def print_run_result(result: RunResult) -> None:
    print(f"Journals: {result.total}")
    print(f"Success: {result.success}")
    print(f"Failed: {result.failed}")
    print(f"New papers: {result.new_papers}")

    if result.details:
        print("\n=== Details ===")
        for detail in result.details:
            mark = "✓" if detail.success else "✗"
            print(f"{mark} {detail.journal_name}: {detail.new_papers} new paper(s)")
            if detail.error:
                print(f"  Error: {detail.error}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Fetch journal RSS feeds now")
    parser.add_argument("journal_id", nargs="?", default=None, help="Fetch only this journal")
    args = parser.parse_args()

    setup_logging()
    runner = FetchRunner(fetch_log_repo=FetchLogRepository())

    try:
        print("🌿 Starting RSS fetch...\n")
        if args.journal_id:
            print(f"Journal: {args.journal_id}")
            result = runner.run_one(args.journal_id)
        else:
            print("Fetching all active journals")
            result = runner.run_all()

        print("\n=== Result ===")
        if result.skipped:
            print("Skipped: another fetch is already running")
        elif isinstance(result, JournalFetchResult):
            print_journal_result(result)
        else:
            print_run_result(result)
        return 0

    except JournalFeedError as e:
        print(f"Error: {e}")
        return 1
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
