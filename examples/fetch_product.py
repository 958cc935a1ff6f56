#!/usr/bin/env python3
from __future__ import annotations

import argparse
import asyncio
import os

from altadata import AltaDataClient


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Fetch rows of an AltaData product")
    p.add_argument("product", nargs="?", default="co_10_jhucs_03")
    p.add_argument("limit", nargs="?", type=int, default=10)
    p.add_argument("--sort", default="reported_date")
    p.add_argument("--order", default="desc", choices=["asc", "desc"])
    p.add_argument("--state", help="only rows for this province_state")
    return p.parse_args()


async def main() -> None:
    args = parse_args()
    api_key = os.environ["ALTADATA_API_KEY"]

    async with AltaDataClient(api_key) as client:
        q = client.get_data(args.product, args.limit).sort_by(args.sort, args.order)
        if args.state:
            q = q.filter_eq("province_state", args.state)
        rows = await client.fetch(q)

    print("=" * 65)
    print(f"Product    : {args.product}")
    print(f"Rows       : {len(rows)}")
    print("=" * 65)
    for row in rows:
        print(row)


if __name__ == "__main__":
    asyncio.run(main())
