"""Routing — path parameters under a route group.

``app.group("/books")`` returns a group whose routes share the prefix.
Each ``{name}`` segment matches one path segment and is passed to the
handler by name.

Run:
    python app.py
"""

from perch import App, AppConfig
from perch.http.response import plain_text

app = App(AppConfig(host="0.0.0.0", port=80))

books = app.group("/books")


@books.route("/{title}/page/{page}")
def book_page(title: str, page: str):
    return plain_text(f"you've reqeusted the book: {title} on page {page}\n")


if __name__ == "__main__":
    app.run()
