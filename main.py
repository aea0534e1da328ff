import logging
from typing import Callable, Dict

import typer

from book import Book
from config import settings
from database import Database, StoreOpenError
from diary import Diary
from utils.ui_helpers import print_rows, promptline, tolerate_undecodable_input

APP_NAME = "Book Diary"

logger = logging.getLogger(__name__)

MENU = (
    "0) List books",
    "1) List books by author",
    "2) List books by title",
    "3) Add books",
    "4) Find books by author",
    "5) Find books by title",
    "6) Delete book by id",
    "X) Drop table and exit",
    "Q) Quit",
)
MENU_PROMPT = "Select an action or Q to quit"
VALID_RESPONSES = frozenset("0123456XQ")


# ------------------------- Command handlers ------------------------- #
def do_list(diary: Diary) -> None:
    print("List books:")
    print_rows(diary.list_books())


def do_list_by_author(diary: Diary) -> None:
    print("List books ordered by author:")
    print_rows(diary.list_books_by_author())


def do_list_by_title(diary: Diary) -> None:
    print("List books ordered by title:")
    print_rows(diary.list_books_by_title())


def do_add(diary: Diary) -> None:
    print("Add book:")
    title = promptline("Title") or ""
    first_name = promptline("Author first name") or ""
    last_name = promptline("Author last name") or ""
    if not diary.add_book(Book(title, first_name, last_name)):
        diary.db.report_error("Could not add row")


def do_find_by_author(diary: Diary) -> None:
    pattern = promptline("Find by author last name") or ""
    print_rows(diary.find_by_author(pattern))


def do_find_by_title(diary: Diary) -> None:
    pattern = promptline("Find by title") or ""
    print_rows(diary.find_by_title(pattern))


def do_delete(diary: Diary) -> None:
    print("Delete book:")
    book_id = promptline("Delete book with ID") or ""
    if not diary.delete_book(book_id):
        diary.db.report_error("Could not delete row")


def do_drop_exit(diary: Diary) -> None:
    """Drop the books table, close the database and exit with status 0."""
    diary.drop_table()
    diary.db.close()
    raise typer.Exit(code=0)


ACTIONS: Dict[str, Callable[[Diary], None]] = {
    "0": do_list,
    "1": do_list_by_author,
    "2": do_list_by_title,
    "3": do_add,
    "4": do_find_by_author,
    "5": do_find_by_title,
    "6": do_delete,
    "X": do_drop_exit,
}


# ------------------------- Menu loop ------------------------- #
def render_menu(diary: Diary) -> None:
    print()
    print(f"Current database {diary.db.filename()}:")
    for line in MENU:
        print(line)


def run_menu(diary: Diary) -> None:
    """Show the menu and dispatch single-character choices until Q (or end of input)."""
    while True:
        render_menu(diary)
        response = promptline(MENU_PROMPT)
        if response is None:
            break
        if len(response) != 1:
            print("Input too long or empty")
            continue
        if "a" <= response <= "z":
            response = response.upper()
        if response not in VALID_RESPONSES:
            print("Invalid response")
            continue
        if response == "Q":
            break
        logger.debug(f"Dispatching menu action {response}")
        ACTIONS[response](diary)


# --- Typer CLI Application ---
app = typer.Typer(help=APP_NAME, add_completion=False)


@app.command()
def run() -> None:
    """Open (or create) a diary database and run the interactive menu."""
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.WARNING))
    tolerate_undecodable_input()

    print("Create (or open if exists) database:")
    filename = promptline(f"Database filename (default {settings.default_db_file})")
    if not filename:
        filename = settings.default_db_file
    print(f"Open {filename}")

    try:
        db = Database.open(filename)
    except StoreOpenError as e:
        print(f"sqlite3_open: {e.message}")
        raise typer.Exit(code=0)

    with db:
        diary = Diary(db)
        diary.ensure_schema()
        run_menu(diary)


if __name__ == "__main__":
    app()
