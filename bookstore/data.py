# bookstore/data.py
from .models import Book

SEED_BOOKS = [
    Book(title="The Silent Patient", author="Alex Michaelides", genre="Thriller", published_year=2019, price=12.99, in_stock=True, pages=336, publisher="Celadon Books"),
    Book(title="Educated", author="Tara Westover", genre="Memoir", published_year=2018, price=14.99, in_stock=True, pages=352, publisher="Random House"),
    Book(title="The Testaments", author="Margaret Atwood", genre="Fiction", published_year=2019, price=16.50, in_stock=False, pages=419, publisher="Chatto & Windus"),
    Book(title="The Hobbit", author="J.R.R. Tolkien", genre="Fantasy", published_year=1937, price=10.99, in_stock=True, pages=310, publisher="George Allen & Unwin"),
    Book(title="Harry Potter and the Sorcerer's Stone", author="J.K. Rowling", genre="Fantasy", published_year=1997, price=9.99, in_stock=True, pages=309, publisher="Bloomsbury"),
    Book(title="The Martian", author="Andy Weir", genre="Science Fiction", published_year=2011, price=11.99, in_stock=True, pages=369, publisher="Crown"),
    Book(title="Dune", author="Frank Herbert", genre="Science Fiction", published_year=1965, price=13.99, in_stock=False, pages=412, publisher="Chilton"),
    Book(title="Lean Startup", author="Eric Ries", genre="Business", published_year=2011, price=19.99, in_stock=True, pages=336, publisher="Crown Business"),
    Book(title="Sapiens", author="Yuval Noah Harari", genre="Non-Fiction", published_year=2014, price=18.99, in_stock=True, pages=443, publisher="Harvill Secker"),
    Book(title="The Name of the Wind", author="Patrick Rothfuss", genre="Fantasy", published_year=2007, price=12.00, in_stock=False, pages=662, publisher="DAW Books"),
    Book(title="Atomic Habits", author="James Clear", genre="Self-Help", published_year=2018, price=17.00, in_stock=True, pages=320, publisher="Avery"),
    Book(title="The Alchemist", author="Paulo Coelho", genre="Fiction", published_year=1988, price=8.99, in_stock=True, pages=208, publisher="HarperOne"),
]


def seed_documents():
    """
    Return the seed catalogue as fresh plain dicts.

    A new list of new dicts is built on every call because insert_many adds
    an _id key to each document it is given.
    """
    return [b.model_dump() for b in SEED_BOOKS]
