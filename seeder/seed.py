# seeder/seed.py
import asyncio
import logging
from bookstore.db import get_books, close_client, ping, MONGO_DB, BOOKS_COLLECTION
from bookstore.data import seed_documents

logger = logging.getLogger("seeder")
logger.setLevel(logging.INFO)
handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
logger.addHandler(handler)


async def seed_books(books):
    """
    Replace the contents of the books collection with the seed catalogue.

    Every existing document is removed before the fixed dataset is inserted,
    so running the seeder any number of times leaves exactly the seed
    records behind (full replace, not upsert).

    Args:
        books: Motor collection to seed

    Returns:
        int: Number of documents inserted
    """
    removed = await books.delete_many({})
    logger.info(f"Removed {removed.deleted_count} existing book documents")

    result = await books.insert_many(seed_documents())
    return len(result.inserted_ids)


async def main():
    """
    Seed the configured database and always release the connection.

    Any connection or write failure is logged with its traceback and ends
    the run. Nothing is retried; the script is meant to be re-run.
    """
    try:
        await ping()
        inserted = await seed_books(get_books())
        logger.info(
            f"Inserted {inserted} book documents into {MONGO_DB}.{BOOKS_COLLECTION}"
        )
    except Exception as e:
        logger.exception(f"Error seeding database: {e}")
    finally:
        close_client()


if __name__ == "__main__":
    asyncio.run(main())
