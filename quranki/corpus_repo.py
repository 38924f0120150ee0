"""
MongoDB repository for corpus access.

Provides functions to query ayahs from the `ayahs` collection and to build
an in-memory AyahCorpus from it.
"""

from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv
from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection

from quranki.corpus import AyahCorpus
from quranki.schemas import Ayah

# Load environment
load_dotenv()

# Configuration
DB_NAME = "quranki"
COLLECTION_NAME = "ayahs"
SORT_ORDER = [("surah_no", ASCENDING), ("ayah_no_surah", ASCENDING)]

# Global connection pool (reused across requests)
_client: Optional[MongoClient] = None
_collection: Optional[Collection] = None


# ---- Connection Management ----

def get_collection() -> Collection:
    """
    Get a connection to the MongoDB ayahs collection.

    Uses a persistent connection pool that's reused across requests.

    Returns:
        MongoDB collection object
    """
    global _client, _collection

    # Return cached collection if it exists
    if _collection is not None:
        return _collection

    mongo_uri = os.getenv("MONGO_URI")
    if not mongo_uri:
        raise ValueError("MONGO_URI not found in environment variables")

    _client = MongoClient(
        mongo_uri,
        maxPoolSize=10,  # Connection pool size
        minPoolSize=1,   # Keep at least 1 connection alive
        maxIdleTimeMS=60000  # Keep connections alive for 60 seconds
    )
    db = _client[DB_NAME]
    _collection = db[COLLECTION_NAME]

    return _collection


def _to_ayah(doc: dict) -> Ayah:
    doc = {k: v for k, v in doc.items() if k != "_id"}
    return Ayah(**doc)


# ---- Query Functions ----

def get_ayahs_by_juz(juz_numbers: list[int], collection: Optional[Collection] = None) -> list[Ayah]:
    """
    Get all ayahs in the given juz numbers, in corpus order.

    Args:
        juz_numbers: Juz numbers (1-30)
        collection: Collection override (default: cached connection)

    Returns:
        List of Ayah models
    """
    collection = collection if collection is not None else get_collection()
    cursor = collection.find({"juz_no": {"$in": list(juz_numbers)}}).sort(SORT_ORDER)
    return [_to_ayah(doc) for doc in cursor]


def get_ayahs_by_surah(surah_numbers: list[int], collection: Optional[Collection] = None) -> list[Ayah]:
    """
    Get all ayahs of the given surahs, in corpus order.
    """
    collection = collection if collection is not None else get_collection()
    cursor = collection.find({"surah_no": {"$in": list(surah_numbers)}}).sort(SORT_ORDER)
    return [_to_ayah(doc) for doc in cursor]


def get_ayah(surah_no: int, ayah_no_surah: int, collection: Optional[Collection] = None) -> Optional[Ayah]:
    collection = collection if collection is not None else get_collection()
    doc = collection.find_one({"surah_no": surah_no, "ayah_no_surah": ayah_no_surah})
    return _to_ayah(doc) if doc else None


def load_corpus(
    collection: Optional[Collection] = None,
    page_mapping: Optional[dict] = None
) -> AyahCorpus:
    """
    Load the whole collection into an AyahCorpus.

    Args:
        collection: Collection override (default: cached connection)
        page_mapping: Optional {(surah_no, ayah_no_surah): page} overriding stored page_no

    Returns:
        AyahCorpus
    """
    collection = collection if collection is not None else get_collection()
    ayahs = [_to_ayah(doc) for doc in collection.find({}).sort(SORT_ORDER)]
    return AyahCorpus(ayahs, page_mapping)
