#!/usr/bin/env python3
"""
Estimate Supabase storage usage from table row counts.

Counts rows in a fixed list of tables (count-only queries, no rows fetched),
weights each count by an approximate row size and compares the total with
the free-tier database quota.

Usage: python scripts/estimate_storage.py
"""

import asyncio
import sys
import os
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence

# Add the backend directory to the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

TABLES = [
    'threat_actors',
    'incidents',
    'iocs',
    'vulnerabilities',
    'malware_samples',
    'alerts',
    'cyber_events',
    'sync_log',
    'user_subscriptions',
    'subscription_events',
]

# Approximate bytes per row
ROW_SIZE_BYTES: Dict[str, int] = {
    'iocs': 200,        # many rows, small values
    'incidents': 800,   # long descriptions and raw payloads
}
DEFAULT_ROW_SIZE_BYTES = 500

STORAGE_QUOTA_BYTES = 500 * 1024 * 1024  # Supabase free tier

MB = 1024 * 1024


@dataclass
class TableEstimate:
    name: str
    rows: int
    bytes: int


@dataclass
class StorageEstimate:
    tables: List[TableEstimate] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)
    quota_bytes: int = STORAGE_QUOTA_BYTES

    @property
    def total_bytes(self) -> int:
        return sum(t.bytes for t in self.tables)

    @property
    def over_quota(self) -> bool:
        return self.total_bytes > self.quota_bytes


def row_size_for(table: str) -> int:
    return ROW_SIZE_BYTES.get(table, DEFAULT_ROW_SIZE_BYTES)


async def count_rows(client, table: str) -> int:
    result = await client.table(table).select('*', count='exact', head=True).execute()
    return result.count or 0


async def estimate_storage(
    client,
    tables: Sequence[str] = TABLES,
    out: Callable[[str], None] = print
) -> StorageEstimate:
    estimate = StorageEstimate()

    for table in tables:
        try:
            rows = await count_rows(client, table)
        except Exception as e:
            estimate.failures[table] = str(e)
            out(f"{table}: Error counting rows ({e})")
            continue

        size = rows * row_size_for(table)
        estimate.tables.append(TableEstimate(name=table, rows=rows, bytes=size))
        out(f"{table}: {rows:,} rows x {row_size_for(table)} B = {size / MB:.2f} MB")

    out("")
    out(f"Estimated total: {estimate.total_bytes / MB:.2f} MB of {estimate.quota_bytes / MB:.0f} MB "
        f"({estimate.total_bytes / estimate.quota_bytes * 100:.1f}%)")
    if estimate.over_quota:
        out("WARNING: estimated storage exceeds the free tier quota")

    return estimate


async def main():
    from vigil.services.supabase import DBConnection

    db = DBConnection()
    try:
        client = await db.client
        print("=" * 60)
        print("STORAGE ESTIMATE")
        print("=" * 60)
        await estimate_storage(client)
    finally:
        await db.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
