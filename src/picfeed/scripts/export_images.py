# src/picfeed/scripts/export_images.py
"""Copy legacy inline post images into the image directory.

Reads migrate inline images lazily; this script does the same for every
remaining row so the ``imgdata`` column can eventually be dropped.
"""
from __future__ import annotations

import argparse
import logging

from picfeed.core.settings import settings
from picfeed.db.session import SessionLocal
from picfeed.services.image_store import ImageStore, get_file_storage

logger = logging.getLogger(__name__)


def export_images(batch_size: int) -> int:
    """Write every legacy image to file storage and return the number written."""
    db = SessionLocal()
    try:
        store = ImageStore(db, get_file_storage(), upload_limit=settings.upload_limit)
        return store.materialize_legacy(batch_size)
    finally:
        db.close()


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--batch-size", type=int, default=100, help="Posts loaded per query")
    args = parser.parse_args()

    logging.basicConfig(level=settings.log_level.upper())
    written = export_images(args.batch_size)
    logger.info("Exported %d legacy images to %s", written, settings.image_dir)


if __name__ == "__main__":
    main()
