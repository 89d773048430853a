#!/usr/bin/env python3
"""
online_library.py
"""

from __future__ import annotations
import argparse
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

import pandas as pd

# Configuration
DEMO_BOOKS: List[Tuple[str, str, bool]] = [
    ("The Great Gatsby", "F. Scott Fitzgerald", False),
    ("1984", "George Orwell", False),
    ("Moby Dick", "Herman Melville", True),
    ("War and Peace", "Leo Tolstoy", True),
]
DEMO_USERS: List[Tuple[str, bool]] = [("Alice", False), ("Bob", True)]
LISTING_HEADER = "Available Books in the Library:"
REPORT_COLUMNS = ["Title", "Author", "Status", "Premium"]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# Logging
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger("OnlineLibrary")


# ---------------- Lifecycle ----------------
class BookState(Enum):
    AVAILABLE = "Available"
    BORROWED = "Borrowed"
    RESERVED = "Reserved"


class Event(Enum):
    BORROW = "borrow"
    RESERVE = "reserve"
    RETURN = "return"


class Outcome(Enum):
    SUCCESS = "success"
    REJECTED = "rejected"


@dataclass(frozen=True)
class TransitionResult:
    """Next state, outcome and message key produced by one lifecycle event."""
    next_state: BookState
    outcome: Outcome
    message_key: str

    @property
    def succeeded(self) -> bool:
        return self.outcome is Outcome.SUCCESS


def _ok(state: BookState, key: str) -> TransitionResult:
    return TransitionResult(state, Outcome.SUCCESS, key)


def _no(state: BookState, key: str) -> TransitionResult:
    return TransitionResult(state, Outcome.REJECTED, key)


_A, _B, _R = BookState.AVAILABLE, BookState.BORROWED, BookState.RESERVED

TRANSITIONS: Dict[Tuple[BookState, Event], TransitionResult] = {
    (_A, Event.BORROW): _ok(_B, "borrowed"),
    (_A, Event.RESERVE): _ok(_R, "reserved"),
    (_A, Event.RETURN): _no(_A, "already_available"),
    (_B, Event.BORROW): _no(_B, "already_borrowed"),
    (_B, Event.RESERVE): _no(_B, "reserve_while_borrowed"),
    (_B, Event.RETURN): _ok(_A, "returned"),
    (_R, Event.BORROW): _no(_R, "borrow_while_reserved"),
    (_R, Event.RESERVE): _no(_R, "already_reserved"),
    (_R, Event.RETURN): _ok(_A, "returned_from_reservation"),
}


def transition(state: BookState, event: Event) -> TransitionResult:
    """
    Look up the lifecycle transition for `event` applied in `state`.

    The table is total over BookState x Event, so every valid pair yields a result;
    invalid operations come back as a REJECTED outcome rather than an error.

    Returns:
        TransitionResult carrying the next state, the outcome and a message key.
    """
    return TRANSITIONS[(state, event)]


# ---------------- Records ----------------
@dataclass(frozen=True)
class Book:
    """
    A catalog entry with a mutable circulation state.

    `title`, `author` and `is_premium` are fixed at construction. `state` always starts
    AVAILABLE and is only changed through `apply` (or the borrow/reserve/return_book
    shortcuts).
    """
    title: str
    author: str
    is_premium: bool = False
    state: BookState = field(default=BookState.AVAILABLE, init=False, compare=False)

    def apply(self, event: Event) -> TransitionResult:
        """
        Run `event` through the lifecycle table and store the resulting state.

        Returns the TransitionResult so callers can render a message.
        """
        result = transition(self.state, event)
        if result.succeeded:
            logger.info("%s: %s -> %s (%s)", self.title, self.state.value,
                        result.next_state.value, event.value)
        else:
            logger.debug("%s: %s rejected in state %s (%s)", self.title, event.value,
                         self.state.value, result.message_key)
        object.__setattr__(self, "state", result.next_state)
        return result

    def borrow(self) -> TransitionResult:
        return self.apply(Event.BORROW)

    def reserve(self) -> TransitionResult:
        return self.apply(Event.RESERVE)

    def return_book(self) -> TransitionResult:
        return self.apply(Event.RETURN)


@dataclass(frozen=True)
class User:
    """Library user; `is_premium` is the entitlement fixed at creation."""
    name: str
    is_premium: bool = False

    @classmethod
    def premium(cls, name: str) -> "User":
        return cls(name, True)

    @classmethod
    def standard(cls, name: str) -> "User":
        return cls(name, False)


# ---------------- Access policy ----------------
def can_borrow(user_is_premium: bool, book_is_premium: bool) -> bool:
    """Premium books may only be borrowed by premium users; everything else is open."""
    return not book_is_premium or user_is_premium


def attempt_borrow(user: User, book: Book) -> TransitionResult:
    """
    Borrow `book` on behalf of `user`.

    The entitlement check runs first: a standard user asking for a premium book is
    rejected with "premium_required" and the book's state is left untouched.
    """
    if not can_borrow(user.is_premium, book.is_premium):
        logger.debug("%s denied premium book %s", user.name, book.title)
        return _no(book.state, "premium_required")
    return book.apply(Event.BORROW)


def attempt_reserve(user: User, book: Book) -> TransitionResult:
    """Reserve `book`; reservations are not premium-gated."""
    return book.apply(Event.RESERVE)


def attempt_return(book: Book) -> TransitionResult:
    """Return `book` from either a loan or a reservation."""
    return book.apply(Event.RETURN)


# ---------------- Catalog ----------------
class CatalogListing(Sequence):
    """
    Live, read-only view over a catalog's books.

    Every iteration re-reads the underlying list, so books added later and state
    changes made after the listing was taken are both visible.
    """

    def __init__(self, books: List[Book]):
        self._books = books

    def __getitem__(self, index):
        return self._books[index]

    def __len__(self) -> int:
        return len(self._books)

    def __iter__(self) -> Iterator[Book]:
        return iter(self._books)


class Catalog:
    """
    Ordered, append-only collection of books.

    Construct one explicitly and pass it to whatever needs it; there is no global
    instance. Books are never removed or reordered.
    """

    def __init__(self, books: Optional[List[Book]] = None):
        self._books: List[Book] = []
        for book in books or []:
            self.add_book(book)

    def add_book(self, book: Book) -> Book:
        """
        Append `book` to the catalog.

        No duplicate check is made. Returns the book that was added.
        """
        self._books.append(book)
        logger.info("Added book %s by %s", book.title, book.author)
        return book

    def list_books(self) -> CatalogListing:
        """Return a live view of all books in insertion order."""
        return CatalogListing(self._books)

    def get_book(self, index: int) -> Optional[Book]:
        """
        Retrieve a book by its catalog position.

        Returns the book or None if `index` is out of range.
        """
        if not 0 <= index < len(self._books):
            logger.warning("Book not found at position: %s", index)
            return None
        return self._books[index]

    def __getitem__(self, index: int) -> Book:
        return self._books[index]

    def __len__(self) -> int:
        return len(self._books)

    def __iter__(self) -> Iterator[Book]:
        return iter(self._books)


# ---------------- Presentation ----------------
MESSAGES: Dict[str, str] = {
    "borrowed": "{title} has been borrowed.",
    "reserved": "{title} has been reserved.",
    "already_available": "{title} is already available.",
    "already_borrowed": "{title} is already borrowed.",
    "reserve_while_borrowed": "{title} cannot be reserved while borrowed.",
    "returned": "{title} has been returned.",
    "borrow_while_reserved": "{title} cannot be borrowed while reserved.",
    "already_reserved": "{title} is already reserved.",
    "returned_from_reservation": "{title} has been returned from reservation.",
    "premium_required": "{name}, you are not allowed to borrow premium books.",
}


def describe(result: TransitionResult, book: Book, user: Optional[User] = None) -> str:
    """
    Render a transition result as a human-readable line.

    Args:
        result: the TransitionResult to describe.
        book: the book the event was applied to.
        user: the acting user, used by messages that address the user by name.
    """
    name = user.name if user is not None else ""
    return MESSAGES[result.message_key].format(title=book.title, author=book.author, name=name)


def format_book(book: Book) -> str:
    return f"{book.title} by {book.author} - Status: {book.state.value} - Premium: {book.is_premium}"


def display_books(catalog: Catalog) -> None:
    """Print every book in the catalog with its current state and premium flag."""
    print(f"\n{LISTING_HEADER}")
    for book in catalog.list_books():
        print(format_book(book))


def export_report_books(catalog: Catalog) -> pd.DataFrame:
    """
    Produce a DataFrame suitable for reporting the catalog.

    One row per book in catalog order, with columns Title, Author, Status, Premium.
    """
    rows = [{"Title": b.title, "Author": b.author, "Status": b.state.value, "Premium": b.is_premium}
            for b in catalog.list_books()]
    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


# ---------------- Demo ----------------
def build_demo_catalog() -> Catalog:
    """Create a catalog holding the four demo books, all available."""
    catalog = Catalog()
    for title, author, premium in DEMO_BOOKS:
        catalog.add_book(Book(title, author, premium))
    return catalog


def build_demo_users() -> List[User]:
    return [User(name, premium) for name, premium in DEMO_USERS]


def demo_run(catalog: Optional[Catalog] = None) -> List[str]:
    """
    Play the fixed demo scenario against `catalog` (a fresh demo catalog by default).

    Prints the catalog listing and one line per outcome. Returns the outcome lines.
    """
    if catalog is None:
        catalog = build_demo_catalog()
    alice, bob = build_demo_users()
    gatsby, nineteen84, moby = catalog[0], catalog[1], catalog[2]
    lines: List[str] = []

    def report(result: TransitionResult, book: Book, user: Optional[User] = None) -> None:
        line = describe(result, book, user)
        lines.append(line)
        print(line)

    display_books(catalog)

    report(attempt_borrow(alice, moby), moby, alice)
    report(attempt_borrow(alice, gatsby), gatsby, alice)
    report(attempt_borrow(bob, moby), moby, bob)
    display_books(catalog)

    report(attempt_reserve(alice, nineteen84), nineteen84, alice)
    report(attempt_borrow(alice, nineteen84), nineteen84, alice)

    report(attempt_borrow(bob, moby), moby, bob)
    report(attempt_return(moby), moby)
    display_books(catalog)
    return lines


# ---------------- CLI ----------------
def input_prompt(prompt: str) -> str:
    """
    Wrapper around built-in input() that returns a stripped string and handles interrupts.

    Returns an empty string on EOF/KeyboardInterrupt.
    """
    try:
        return input(prompt).strip()
    except (EOFError, KeyboardInterrupt):
        print()
        return ""


def print_menu(user: User) -> None:
    print(f"\n--- Online Library (acting as {user.name}, "
          f"{'premium' if user.is_premium else 'standard'}) ---")
    print("1. List all books")
    print("2. Show catalog report")
    print("3. Borrow book")
    print("4. Reserve book")
    print("5. Return book")
    print("6. Add book")
    print("7. Switch user")
    print("0. Exit")


def _pick_book(catalog: Catalog) -> Optional[Book]:
    for i, book in enumerate(catalog.list_books(), start=1):
        print(f"{i}. {format_book(book)}")
    raw = input_prompt("Book number: ")
    if not raw.isdigit():
        print("Invalid book number.")
        return None
    book = catalog.get_book(int(raw) - 1)
    if book is None:
        print("No such book.")
    return book


def cli_loop(catalog: Catalog, users: List[User]) -> None:
    """
    Interactive command-loop for the library.

    Presents a text menu, accepts user input and runs the access-policy operations
    as the currently selected user. An empty answer (or EOF) at the menu exits.
    With no users there is nobody to act as, so the loop returns immediately.
    """
    if not users:
        logger.warning("No users configured; nothing to do")
        print("No users available.")
        return
    current = users[0]
    while True:
        print_menu(current)
        choice = input_prompt("Choose (0-7): ")
        if choice in ("0", ""):
            print("Goodbye.")
            break
        elif choice == "1":
            display_books(catalog)
        elif choice == "2":
            print(export_report_books(catalog).to_string(index=False))
        elif choice in ("3", "4", "5"):
            book = _pick_book(catalog)
            if book is None:
                continue
            if choice == "3":
                result = attempt_borrow(current, book)
            elif choice == "4":
                result = attempt_reserve(current, book)
            else:
                result = attempt_return(book)
            print(describe(result, book, current))
        elif choice == "6":
            title = input_prompt("Title: ")
            author = input_prompt("Author: ")
            premium = input_prompt("Premium (y/n): ").lower().startswith("y")
            if not title:
                print("Failed (title is required).")
                continue
            catalog.add_book(Book(title, author, premium))
            print("Added.")
        elif choice == "7":
            for i, user in enumerate(users, start=1):
                print(f"{i}. {user.name}{' (premium)' if user.is_premium else ''}")
            raw = input_prompt("User number: ")
            if raw.isdigit() and 1 <= int(raw) <= len(users):
                current = users[int(raw) - 1]
            else:
                print("Unknown user.")
        else:
            print("Unknown choice. Try again.")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Online library catalog demo")
    parser.add_argument("--interactive", action="store_true", help="Run the interactive menu instead of the demo")
    parser.add_argument("--report", action="store_true", help="Print a tabular catalog report at the end")
    parser.add_argument("--log-level", default="WARNING", type=str.upper, choices=LOG_LEVELS,
                        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)")
    args = parser.parse_args(argv)

    logging.getLogger().setLevel(args.log_level)

    catalog = build_demo_catalog()
    if args.interactive:
        cli_loop(catalog, build_demo_users())
    else:
        demo_run(catalog)
    if args.report:
        print()
        print(export_report_books(catalog).to_string(index=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
