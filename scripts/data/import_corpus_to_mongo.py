"""
Import the Quran corpus from CSV to MongoDB.

This script:
1. Reads quran.csv (one row per ayah)
2. Optionally merges ayah-page-mapping.csv into page_no
3. Validates every row as an Ayah
4. Upserts into the `ayahs` collection keyed by (surah_no, ayah_no_surah)

Usage:
    python -m scripts.data.import_corpus_to_mongo [--csv PATH] [--page-mapping PATH] [--dry-run]
"""

from __future__ import annotations

import argparse
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pymongo import ASCENDING, MongoClient, UpdateOne

from quranki.corpus import load_corpus_csv
from quranki.corpus_repo import COLLECTION_NAME, DB_NAME

# Load environment
load_dotenv()

# Configuration
CSV_PATH = Path("data/quran.csv")
BATCH_SIZE = 500


def import_corpus(
    csv_path: Path = CSV_PATH,
    page_mapping_path: Optional[Path] = None,
    dry_run: bool = False
) -> int:
    """
    Import corpus rows into MongoDB.

    Args:
        csv_path: quran.csv location
        page_mapping_path: Optional ayah-page-mapping.csv
        dry_run: If True, validate only

    Returns:
        Number of ayahs processed
    """
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV not found: {csv_path}")

    corpus = load_corpus_csv(csv_path, page_mapping_path)
    print(f"Loaded {len(corpus)} ayahs in {len(corpus.surahs())} surahs from {csv_path}")

    if dry_run:
        print("\n⚠ DRY RUN MODE - No changes were made to MongoDB")
        return len(corpus)

    mongo_uri = os.getenv("MONGO_URI")
    if not mongo_uri:
        raise ValueError("MONGO_URI not found in environment variables")

    print("Connecting to MongoDB...")
    client = MongoClient(mongo_uri)
    collection = client[DB_NAME][COLLECTION_NAME]
    client.admin.command("ping")
    print(f"✓ Connected to MongoDB: {DB_NAME}.{COLLECTION_NAME}\n")

    collection.create_index([("surah_no", ASCENDING), ("ayah_no_surah", ASCENDING)], unique=True)
    collection.create_index([("juz_no", ASCENDING)])

    operations = []
    written = 0
    for ayah in corpus:
        doc = ayah.model_dump()
        page = corpus.page_number(ayah.key)
        if page is not None:
            doc["page_no"] = page
        operations.append(UpdateOne(
            {"surah_no": ayah.surah_no, "ayah_no_surah": ayah.ayah_no_surah},
            {"$set": doc},
            upsert=True,
        ))
        if len(operations) >= BATCH_SIZE:
            collection.bulk_write(operations, ordered=False)
            written += len(operations)
            operations = []
            print(f"  ✓ {written} ayahs written")

    if operations:
        collection.bulk_write(operations, ordered=False)
        written += len(operations)

    print(f"\n✓ Import complete: {written} ayahs upserted")
    return written


def main():
    parser = argparse.ArgumentParser(description="Import the Quran corpus to MongoDB")
    parser.add_argument("--csv", type=Path, default=CSV_PATH, help="Path to quran.csv")
    parser.add_argument("--page-mapping", type=Path, help="Path to ayah-page-mapping.csv")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate the CSV without writing to MongoDB"
    )

    args = parser.parse_args()

    import_corpus(
        csv_path=args.csv,
        page_mapping_path=args.page_mapping,
        dry_run=args.dry_run
    )


if __name__ == "__main__":
    main()
