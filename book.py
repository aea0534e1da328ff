from __future__ import annotations


class Book:
    """A book as entered at the prompts; the store assigns ``id`` on insert."""

    def __init__(self, title: str, first_name: str, last_name: str, id: int | None = None) -> None:
        self.id = id
        self.title = title
        self.first_name = first_name
        self.last_name = last_name

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.first_name} {self.last_name} (ID: {self.id})"

    def __repr__(self) -> str:
        return f"Book(title={self.title!r}, first_name={self.first_name!r}, last_name={self.last_name!r}, id={self.id!r})"
