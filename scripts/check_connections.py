#!/usr/bin/env python3
"""
Connection Test Script

Run this to verify the document store is reachable and supports transactions.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from admissions_portal.core.config import get_settings
from admissions_portal.core.errors import StoreUnavailable
from admissions_portal.db import get_document_store
from admissions_portal.db.mongodb import test_mongo_connection


def main():
    settings = get_settings()
    print("=" * 50)
    print("ADMISSIONS PORTAL - CONNECTION TEST")
    print("=" * 50)

    store = get_document_store()

    print(f"\n[1] Testing {settings.store_backend} store...")
    if settings.store_backend == "mongo":
        print(f"    URI: {settings.mongodb_uri}")
        print(f"    Database: {settings.mongodb_db}")
    reachable = test_mongo_connection() if settings.store_backend == "mongo" else store.ping()
    if reachable:
        print("    ✅ Store: CONNECTED")
    else:
        print("    ❌ Store: FAILED")
        return

    print("\n[2] Testing transactions...")
    try:
        store.run_transaction("connection-test", lambda tx: tx.get("locks", "connection-test"))
        print("    ✅ Transactions: SUPPORTED")
    except StoreUnavailable as e:
        print(f"    ❌ Transactions: FAILED ({e.message})")
        print("    MongoDB transactions need a replica set (e.g. mongod --replSet rs0)")

    print("\n" + "=" * 50)
    print("Connection test complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
