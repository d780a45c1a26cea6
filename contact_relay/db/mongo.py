import motor.motor_asyncio
import logging
from typing import Optional, Tuple

from contact_relay.core.config import Settings

# Set up logger
logger = logging.getLogger(__name__)


def mask_uri(uri: str) -> str:
    """Mask the password in a connection string for logging"""
    masked_uri = uri
    if '@' in uri and ':' in uri:
        parts = uri.split('@')
        if len(parts) > 1:
            credentials_part = parts[0]
            if ':' in credentials_part:
                user_pass = credentials_part.split('://')[-1]
                if ':' in user_pass:
                    user, password = user_pass.split(':', 1)
                    masked_credentials = f"{user}:{'*' * len(password)}"
                    masked_uri = uri.replace(user_pass, masked_credentials)
    return masked_uri


async def connect_mongo(settings: Settings) -> Tuple[Optional[motor.motor_asyncio.AsyncIOMotorClient], Optional[motor.motor_asyncio.AsyncIOMotorDatabase]]:
    """
    Create the process wide MongoDB client.

    Returns (None, None) when MONGODB_URI is not set. A server that cannot be
    reached at startup is logged but does not stop the application; inserts
    made while it is down fail the request that made them.
    """
    if not settings.mongodb_uri:
        logger.warning("MONGODB_URI is not set. Submissions will not be saved.")
        return None, None

    logger.info(f"MongoDB URI configured: {mask_uri(settings.mongodb_uri)}")

    client = motor.motor_asyncio.AsyncIOMotorClient(
        settings.mongodb_uri,
        maxPoolSize=10,
        minPoolSize=0,
        serverSelectionTimeoutMS=5000,
        connectTimeoutMS=10000
    )
    db = client[settings.mongodb_db]

    try:
        await client.admin.command("ping")
        logger.info(f"Connected to MongoDB database: {settings.mongodb_db}")
    except Exception as e:
        logger.error(f"MongoDB connection error: {str(e)}")

    return client, db

