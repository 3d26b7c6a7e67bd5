#!/usr/bin/env python3
"""
Outbox Flush

Re-delivers transition notifications whose first delivery failed.
Safe to run repeatedly (e.g. from cron): delivery is keyed by the
transition event, so nothing is duplicated.

Usage: python scripts/flush_outbox.py [--limit 100]
"""
import argparse
import sys
sys.path.insert(0, '.')

from admissions_portal.core.logging import configure_logging
from admissions_portal.services import get_services


def main():
    parser = argparse.ArgumentParser(description="Deliver pending notification outbox entries")
    parser.add_argument("--limit", type=int, default=100)
    args = parser.parse_args()

    configure_logging()
    notifications = get_services().notifications

    pending = notifications.pending_outbox(args.limit)
    print(f"Pending outbox entries: {len(pending)}")
    for entry in pending:
        print(f"  - {entry['id']} attempts={entry.get('attempts', 0)} last_error={entry.get('last_error')}")

    delivered = notifications.flush_outbox(args.limit)
    print(f"✅ Delivered {delivered} notification(s)")


if __name__ == "__main__":
    main()
