# queries/runner.py
import asyncio
import logging
from pymongo import ASCENDING, DESCENDING
from bookstore.db import get_books, close_client, ping
from bookstore.utils import uses_index, plan_stages
from . import queries
from .reporter import print_heading, print_table, print_plan

logger = logging.getLogger("queries")
logger.setLevel(logging.INFO)
handler = logging.StreamHandler()
handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
logger.addHandler(handler)

GENRE = "Fantasy"
YEAR = 2010
AUTHOR = "Andy Weir"
UPDATE_TITLE = "The Martian"
NEW_PRICE = 12.99
DELETE_TITLE = "The Alchemist"
EXPLAIN_TITLE = "Dune"
PAGES = (1, 2)


class QueryRunner:
    def __init__(self, books):
        self.books = books
        self.plans = {}
        self.failed = []

    def steps(self):
        """
        The demonstration steps in execution order.

        Returns:
            list[tuple[str, callable | None]]: (name, coroutine function)
            pairs. A None function marks a section heading.

        Note:
            create_indexes must stay between the two explain steps, otherwise
            the before/after plans show the same access path.
        """
        return [
            ("Basic queries", None),
            ("genre", self.show_genre),
            ("published after", self.show_published_after),
            ("author", self.show_author),
            ("update price", self.show_update_price),
            ("delete", self.show_delete),
            ("Advanced queries", None),
            ("in stock after", self.show_in_stock_after),
            ("price ascending", self.show_price_ascending),
            ("price descending", self.show_price_descending),
            ("pagination", self.show_pages),
            ("Aggregations", None),
            ("average price by genre", self.show_average_price_by_genre),
            ("top author", self.show_top_author),
            ("books by decade", self.show_books_by_decade),
            ("Indexing & explain()", None),
            ("drop title index", self.drop_title_index),
            ("explain before index", self.show_explain_before),
            ("create indexes", self.create_indexes),
            ("explain after index", self.show_explain_after),
            ("explain summary", self.show_explain_summary),
        ]

    async def run_step(self, name, step):
        """
        Run one step, logging and recording a failure instead of raising.

        Returns:
            bool: True if the step completed
        """
        try:
            await step()
            return True
        except Exception as e:
            logger.exception(f"Step '{name}' failed: {e}")
            self.failed.append(name)
            return False

    async def run(self):
        for name, step in self.steps():
            if step is None:
                print_heading(name)
                continue
            await self.run_step(name, step)
        if self.failed:
            logger.warning(f"{len(self.failed)} step(s) failed: {', '.join(self.failed)}")
        return self.failed

    async def show_genre(self):
        docs = await queries.find_by_genre(self.books, GENRE)
        rows = [
            {"title": b["title"], "author": b["author"], "year": b["published_year"]}
            for b in docs
        ]
        print_table(f"Books in genre = {GENRE}", rows)

    async def show_published_after(self):
        docs = await queries.find_published_after(self.books, YEAR)
        rows = [{"title": b["title"], "year": b["published_year"]} for b in docs]
        print_table(f"Books published after {YEAR}", rows)

    async def show_author(self):
        docs = await queries.find_by_author(self.books, AUTHOR)
        rows = [{"title": b["title"], "year": b["published_year"]} for b in docs]
        print_table(f"Books by {AUTHOR}", rows)

    async def show_update_price(self):
        res = await queries.update_price(self.books, UPDATE_TITLE, NEW_PRICE)
        print(
            f"\nUpdatePrice - matched: {res.matched_count}, modified: {res.modified_count}"
        )

    async def show_delete(self):
        res = await queries.delete_by_title(self.books, DELETE_TITLE)
        print(f"\nDelete - deletedCount: {res.deleted_count}")

    async def show_in_stock_after(self):
        docs = await queries.find_in_stock_after(self.books, YEAR)
        print_table(f"In-stock & published after {YEAR}", docs)

    async def show_price_ascending(self):
        docs = await queries.sorted_by_price(self.books, ASCENDING)
        print_table("Books sorted by price (ascending)", docs)

    async def show_price_descending(self):
        docs = await queries.sorted_by_price(self.books, DESCENDING)
        print_table("Books sorted by price (descending)", docs)

    async def show_pages(self):
        for page in PAGES:
            docs = await queries.get_page(self.books, page)
            print_table(f"Page {page} (pageSize={queries.PAGE_SIZE})", docs)

    async def show_average_price_by_genre(self):
        groups = await queries.average_price_by_genre(self.books)
        rows = [
            {
                "genre": g["_id"],
                "averagePrice": round(g["averagePrice"], 2),
                "count": g["count"],
            }
            for g in groups
        ]
        print_table("Average price by genre", rows)

    async def show_top_author(self):
        groups = await queries.top_author(self.books)
        rows = [{"author": a["_id"], "count": a["count"]} for a in groups]
        print_table("Author with most books", rows)

    async def show_books_by_decade(self):
        groups = await queries.books_by_decade(self.books)
        rows = [{"decade": f"{int(d['_id'])}s", "count": d["count"]} for d in groups]
        print_table("Books grouped by decade", rows)

    async def drop_title_index(self):
        await queries.drop_title_index(self.books)

    async def show_explain_before(self):
        plan = await queries.explain_title_lookup(self.books, EXPLAIN_TITLE)
        self.plans["before"] = plan
        print_plan("Explain (before index) - winning plan", plan)

    async def create_indexes(self):
        names = await queries.create_indexes(self.books)
        print(f"\nCreated index: {' and '.join(names)}")

    async def show_explain_after(self):
        plan = await queries.explain_title_lookup(self.books, EXPLAIN_TITLE)
        self.plans["after"] = plan
        print_plan("Explain (after index) - winning plan", plan)

    async def show_explain_summary(self):
        before = self.plans.get("before")
        after = self.plans.get("after")
        if before is None or after is None:
            print("\nSummary: explain output incomplete, see errors above.")
            return
        print(
            "\nSummary: before index "
            f"{' -> '.join(plan_stages(before)) or 'unknown'}"
            f" ({'index' if uses_index(before) else 'collection scan'}), "
            "after index "
            f"{' -> '.join(plan_stages(after)) or 'unknown'}"
            f" ({'index' if uses_index(after) else 'collection scan'})."
        )


async def main():
    """
    Connect, run every demonstration step in order, always disconnect.

    The server is pinged before the first step so an unreachable server
    fails the run once here instead of once per step.
    """
    try:
        await ping()
        await QueryRunner(get_books()).run()
    except Exception as e:
        logger.exception(f"Error running queries: {e}")
    finally:
        close_client()


if __name__ == "__main__":
    asyncio.run(main())
