"""HTML pages.

Pages are small enough to be built with f-strings; every interpolated value
is escaped.
"""

from collections.abc import Iterable
from html import escape

from apps.rss2twtxt.services import Feed

INDEX_TITLE = "RSS/Atom to twtxt feed aggregator service"
FEEDS_TITLE = "Available twtxt feeds"

_STYLE = """<style>
  body { font-family: system-ui, sans-serif; max-width: 48rem; margin: 2rem auto; padding: 0 1rem; }
  h1 { font-size: 1.5rem; }
  table { border-collapse: collapse; width: 100%; }
  td { padding: 0.25rem 0.5rem; vertical-align: middle; }
  img.avatar { width: 24px; height: 24px; }
  .message { padding: 1rem; border-radius: 8px; background: #f3f4f6; }
</style>"""


def _page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>{escape(title)}</title>
{_STYLE}</head>
<body>
<h1>{escape(title)}</h1>
{body}
<footer><p><a href="/">Home</a> | <a href="/feeds">Feeds</a></p></footer>
</body></html>
"""


def render_index() -> str:
    """Landing page with the registration form."""
    body = """<p>Turn any RSS/Atom feed into a twtxt feed.</p>
<form action="/" method="post">
  <label for="url">Feed URL</label>
  <input type="url" id="url" name="url" placeholder="https://example.com/feed.xml" required>
  <button type="submit">Add feed</button>
</form>"""
    return _page(INDEX_TITLE, body)


def render_feeds(feeds: Iterable[Feed]) -> str:
    """Human-readable feed list."""
    rows = []
    for feed in feeds:
        name = escape(feed.name)
        rows.append(
            f'  <tr><td><img class="avatar" src="/avatar/{name}" alt=""></td>'
            f'<td><a href="/{name}/twtxt.txt">{name}</a></td>'
            f'<td><a href="{escape(feed.url)}">{escape(feed.url)}</a></td></tr>'
        )
    if not rows:
        return _page(FEEDS_TITLE, "<p>No feeds registered yet.</p>")
    table = "<table>\n" + "\n".join(rows) + "\n</table>"
    return _page(FEEDS_TITLE, table)


def render_message(title: str, message: str) -> str:
    """Status page for registration outcomes."""
    return _page(title, f'<p class="message">{escape(message)}</p>')


def render_plain_feeds(feeds: Iterable[Feed]) -> str:
    """Line-oriented feed list: one ``name url`` pair per line."""
    return "".join(f"{feed.name} {feed.url}\n" for feed in feeds)
