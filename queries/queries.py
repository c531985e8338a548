# queries/queries.py
import logging
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import OperationFailure
from bookstore.utils import page_offset
from .pipelines import (
    average_price_by_genre_pipeline,
    top_author_pipeline,
    books_by_decade_pipeline,
)

logger = logging.getLogger("queries")

PAGE_SIZE = 5
TITLE_INDEX = "title_idx"
AUTHOR_YEAR_INDEX = "author_year_idx"
INDEX_NOT_FOUND = 27


async def find_by_genre(books, genre):
    """
    Find every book whose genre matches exactly.

    Args:
        books: Motor collection
        genre (str): Genre name, e.g. "Fantasy"

    Returns:
        list[dict]: Full book documents in natural order
    """
    return await books.find({"genre": genre}).to_list(length=None)


async def find_published_after(books, year):
    """
    Find books published strictly after the given year.

    Returns:
        list[dict]: Full book documents with published_year > year
    """
    return await books.find({"published_year": {"$gt": year}}).to_list(length=None)


async def find_by_author(books, author):
    """Find every book by an exact author name."""
    return await books.find({"author": author}).to_list(length=None)


async def update_price(books, title, price):
    """
    Set the price of the first book with the given title.

    Returns:
        UpdateResult: exposes matched_count and modified_count
    """
    return await books.update_one({"title": title}, {"$set": {"price": price}})


async def delete_by_title(books, title):
    """Delete the first book with the given title and return the DeleteResult."""
    return await books.delete_one({"title": title})


async def find_in_stock_after(books, year):
    """
    Find in-stock books published after the given year.

    Args:
        books: Motor collection
        year (int): Exclusive lower bound on published_year

    Returns:
        list[dict]: Documents with only title, author and price; _id is
        suppressed by the projection
    """
    cursor = books.find(
        {"in_stock": True, "published_year": {"$gt": year}},
        {"title": 1, "author": 1, "price": 1, "_id": 0},
    )
    return await cursor.to_list(length=None)


async def sorted_by_price(books, direction=ASCENDING):
    """
    List every book's title and price ordered by price.

    Args:
        books: Motor collection
        direction (int): ASCENDING or DESCENDING. Defaults to ASCENDING

    Returns:
        list[dict]: {title, price} rows without _id
    """
    cursor = books.find({}, {"title": 1, "price": 1, "_id": 0}).sort(
        [("price", direction)]
    )
    return await cursor.to_list(length=None)


async def get_page(books, page, page_size=PAGE_SIZE):
    """
    Fetch one page of the catalogue ordered by title.

    Args:
        books: Motor collection
        page (int): 1-based page number
        page_size (int): Documents per page. Defaults to PAGE_SIZE

    Returns:
        list[dict]: At most page_size documents with title, author and price

    Raises:
        ValueError: if page or page_size is below 1
    """
    skip = page_offset(page, page_size)
    cursor = (
        books.find({}, {"title": 1, "author": 1, "price": 1, "_id": 0})
        .sort([("title", ASCENDING)])
        .skip(skip)
        .limit(page_size)
    )
    return await cursor.to_list(length=page_size)


async def average_price_by_genre(books):
    """
    Average price and book count per genre, most expensive genre first.

    Returns:
        list[dict]: Rows shaped {_id: genre, averagePrice, count}

    Note:
        averagePrice is not rounded here; callers round for display.
    """
    return await books.aggregate(average_price_by_genre_pipeline()).to_list(
        length=None
    )


async def top_author(books):
    """
    The author with the most books.

    Returns:
        list[dict]: A single {_id: author, count} row, or an empty list for
        an empty collection. Ties are resolved by server order.
    """
    return await books.aggregate(top_author_pipeline()).to_list(length=None)


async def books_by_decade(books):
    """
    Book counts per publication decade, oldest first.

    Returns:
        list[dict]: Rows shaped {_id: decade, count}; the server returns the
        decade as a double, e.g. 1930.0
    """
    return await books.aggregate(books_by_decade_pipeline()).to_list(length=None)


def is_index_not_found(exc):
    """True when an OperationFailure reports a missing index."""
    if exc.code == INDEX_NOT_FOUND:
        return True
    return "index not found" in str(exc).lower()


async def drop_title_index(books):
    """
    Drop the title index so the next explain shows a collection scan.

    Returns:
        bool: True if the index existed and was dropped, False if it was
        already absent

    Raises:
        OperationFailure: for any failure other than a missing index
    """
    try:
        await books.drop_index(TITLE_INDEX)
    except OperationFailure as e:
        if not is_index_not_found(e):
            raise
        logger.info(f"Index {TITLE_INDEX} not present, nothing to drop")
        return False
    return True


async def explain_title_lookup(books, title):
    """
    Return the winning plan for an exact title lookup.

    Falls back to the whole explain document when the server reply has no
    queryPlanner.winningPlan section.
    """
    # Motor's cursor.explain() runs at the server default verbosity rather than
    # executionStats; the queryPlanner section read below is present in both.
    explain = await books.find({"title": title}).explain()
    winning = explain.get("queryPlanner", {}).get("winningPlan")
    return winning if winning else explain


async def create_indexes(books):
    """Create the title and author/year indexes and return their names."""
    title = await books.create_index([("title", ASCENDING)], name=TITLE_INDEX)
    author_year = await books.create_index(
        [("author", ASCENDING), ("published_year", DESCENDING)],
        name=AUTHOR_YEAR_INDEX,
    )
    return [title, author_year]
