"""
Database initialization module for the contact relay.
Ensures the collections and indexes used by the application exist when the
service starts. Safe to run repeatedly.
"""

import logging
from datetime import datetime, timezone
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from contact_relay.db.submissions import SUBMISSIONS_COLLECTION

# Set up logger
logger = logging.getLogger(__name__)

REQUIRED_COLLECTIONS = [
    {
        "name": SUBMISSIONS_COLLECTION,
        "description": "Stores contact form submissions with embedded attachment metadata",
        "indexes": [
            {"keys": [("created_at", DESCENDING)], "unique": False},
            {"keys": [("email", 1)], "unique": False}
        ]
    }
]


async def collection_exists(db, collection_name):
    """
    Check if a collection exists in the database.

    Args:
        db: MongoDB database connection
        collection_name (str): Name of the collection to check

    Returns:
        bool: True if collection exists, False otherwise
    """
    collections = await db.list_collection_names()
    return collection_name in collections


async def create_collection_with_indexes(db, collection_config):
    """
    Create a collection with its required indexes if it doesn't exist.

    Returns:
        bool: True if successful, False otherwise
    """
    collection_name = collection_config["name"]
    description = collection_config.get("description", "")
    indexes = collection_config.get("indexes", [])

    try:
        if await collection_exists(db, collection_name):
            logger.info(f"✅ Collection '{collection_name}' already exists")
        else:
            logger.info(f"🔄 Creating collection '{collection_name}': {description}")
            await db.create_collection(collection_name)

        collection = db[collection_name]
        for index_config in indexes:
            keys = index_config["keys"]
            options = {k: v for k, v in index_config.items() if k != "keys"}
            await collection.create_index(keys, **options)
            logger.debug(f"✅ Index {keys} ensured for '{collection_name}'")

        return True

    except PyMongoError as e:
        logger.error(f"❌ Failed to prepare collection '{collection_name}': {str(e)}")
        return False


async def initialize_database(db):
    """
    Create all required collections and indexes.

    Returns:
        bool: True if every collection is ready, False otherwise
    """
    start_time = datetime.now(timezone.utc)
    logger.info(f"📊 Initializing database: {db.name}")

    error_count = 0
    for collection_config in REQUIRED_COLLECTIONS:
        if not await create_collection_with_indexes(db, collection_config):
            error_count += 1

    duration = (datetime.now(timezone.utc) - start_time).total_seconds()
    if error_count == 0:
        logger.info(f"🎉 Database initialization completed in {duration:.2f}s")
        return True

    logger.warning(f"⚠️ Database initialization finished with {error_count} errors in {duration:.2f}s")
    return False
