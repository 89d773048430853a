import sys
import pathlib
sys.path.insert(0, str(pathlib.Path(__file__).resolve().parent.parent))

import dataclasses

import pytest

from online_library import (
    Book, BookState, Outcome, User,
    attempt_borrow, attempt_reserve, attempt_return, can_borrow,
)


@pytest.mark.parametrize("user_premium,book_premium,allowed", [
    (False, False, True),
    (False, True, False),
    (True, False, True),
    (True, True, True),
])
def test_can_borrow(user_premium, book_premium, allowed):
    assert can_borrow(user_premium, book_premium) is allowed


def test_user_constructors():
    assert User.premium("Bob") == User("Bob", True)
    assert User.standard("Alice") == User("Alice", False)


def test_standard_user_cannot_borrow_premium_book():
    book = Book("Moby Dick", "Herman Melville", True)
    result = attempt_borrow(User.standard("Alice"), book)
    assert result.outcome is Outcome.REJECTED
    assert result.message_key == "premium_required"
    assert book.state is BookState.AVAILABLE


def test_premium_user_borrows_premium_book():
    book = Book("Moby Dick", "Herman Melville", True)
    result = attempt_borrow(User.premium("Bob"), book)
    assert result.outcome is Outcome.SUCCESS
    assert book.state is BookState.BORROWED


def test_premium_gate_runs_before_state_check():
    book = Book("Moby Dick", "Herman Melville", True)
    book.reserve()
    result = attempt_borrow(User.standard("Alice"), book)
    assert result.message_key == "premium_required"
    assert book.state is BookState.RESERVED


@pytest.mark.parametrize("user", [User.standard("Alice"), User.premium("Bob")])
def test_borrow_while_reserved_is_rejected(user):
    book = Book("1984", "George Orwell")
    attempt_reserve(user, book)
    result = attempt_borrow(user, book)
    assert result.outcome is Outcome.REJECTED
    assert result.message_key == "borrow_while_reserved"
    assert book.state is BookState.RESERVED


def test_return_then_return_again():
    book = Book("Moby Dick", "Herman Melville", True)
    attempt_borrow(User.premium("Bob"), book)
    first = attempt_return(book)
    assert first.outcome is Outcome.SUCCESS
    assert book.state is BookState.AVAILABLE
    second = attempt_return(book)
    assert second.outcome is Outcome.REJECTED
    assert second.message_key == "already_available"
    assert book.state is BookState.AVAILABLE


def test_reservation_is_not_premium_gated():
    book = Book("War and Peace", "Leo Tolstoy", True)
    result = attempt_reserve(User.standard("Alice"), book)
    assert result.outcome is Outcome.SUCCESS
    assert book.state is BookState.RESERVED


def test_premium_flag_cannot_be_cleared_to_skip_the_gate():
    book = Book("Moby Dick", "Herman Melville", True)
    with pytest.raises(dataclasses.FrozenInstanceError):
        book.is_premium = False
    result = attempt_borrow(User.standard("Alice"), book)
    assert result.message_key == "premium_required"
    assert book.state is BookState.AVAILABLE
