"""Delete staged upload chunks that were never completed.

Run periodically (cron or a scheduled task) against the configured bucket:

    python scripts/sweep_chunks.py --max-age 86400
"""

import argparse
import asyncio
import logging
import os
import sys

sys.path.append(os.getcwd())

from myvoice.config.settings import settings  # noqa: E402
from myvoice.controllers.dependencies import get_blob_store  # noqa: E402
from myvoice.services import ChunkReassembler  # noqa: E402


async def sweep(max_age: float) -> int:
    reassembler = ChunkReassembler(get_blob_store(), max_chunks=settings.uploads.max_chunks)
    return await reassembler.sweep_stale(max_age)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument(
        "--max-age",
        type=float,
        default=settings.uploads.stale_chunk_seconds,
        help="Age in seconds after which a staged chunk is considered abandoned",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(levelname)s | %(message)s")
    removed = asyncio.run(sweep(args.max_age))
    print(f"Removed {removed} stale chunk(s)")


if __name__ == "__main__":
    main()
