# bookstore/db.py
import os
from motor.motor_asyncio import AsyncIOMotorClient
from dotenv import load_dotenv

load_dotenv()

MONGO_URI = os.getenv("MONGO_URI", "mongodb://127.0.0.1:27017")
MONGO_DB = os.getenv("MONGO_DB", "plp_bookstore")
BOOKS_COLLECTION = "books"

_client = None
_db = None


def get_client():
    """Initialize and return the MongoDB AsyncIOMotorClient singleton."""
    global _client, _db
    if _client is None:
        _client = AsyncIOMotorClient(MONGO_URI)
        _db = _client[MONGO_DB]
    return _client


def get_db():
    """Return the MongoDB database instance, initializing if needed."""
    global _db
    if _db is None:
        get_client()
    return _db


def get_books():
    """Return the books collection of the configured database."""
    return get_db()[BOOKS_COLLECTION]


def close_client():
    """
    Close the client singleton and forget it.

    Safe to call when no client was ever created. A later get_client()
    call opens a fresh connection.
    """
    global _client, _db
    if _client is not None:
        _client.close()
    _client = None
    _db = None


async def ping():
    """
    Round-trip a ping command to the server.

    Motor connects lazily, so this is the first call that actually reaches
    MongoDB. Raises ServerSelectionTimeoutError when no server answers.
    """
    return await get_client().admin.command("ping")
