"""Reduce an HTML page to its visible text."""

import re
from html.parser import HTMLParser

# Elements whose text is never shown to a reader
_SKIPPED_TAGS = frozenset({"script", "style", "noscript", "template", "svg", "head"})

# Elements that start a new line of text
_BLOCK_TAGS = frozenset(
    {
        "p", "div", "br", "li", "ul", "ol", "tr", "table", "section", "article",
        "header", "footer", "nav", "aside", "main", "blockquote", "pre",
        "h1", "h2", "h3", "h4", "h5", "h6",
    }
)


class _VisibleTextParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.parts: list[str] = []
        self.title: str | None = None
        self._skip_depth = 0
        self._in_title = False

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if tag == "title":
            self._in_title = True
        elif tag in _SKIPPED_TAGS:
            self._skip_depth += 1
        elif tag in _BLOCK_TAGS:
            self.parts.append("\n")

    def handle_endtag(self, tag: str) -> None:
        if tag == "title":
            self._in_title = False
        elif tag in _SKIPPED_TAGS and self._skip_depth:
            self._skip_depth -= 1
        elif tag in _BLOCK_TAGS:
            self.parts.append("\n")

    def handle_data(self, data: str) -> None:
        if self._in_title:
            self.title = (self.title or "") + data
        elif not self._skip_depth:
            self.parts.append(data)


def html_to_text(html: str) -> str:
    """Extract visible text from an HTML document.

    Drops script/style content, keeps the page title as the first line and
    collapses runs of whitespace.
    """
    parser = _VisibleTextParser()
    parser.feed(html)
    parser.close()

    lines = []
    for line in "".join(parser.parts).splitlines():
        line = re.sub(r"[ \t\f\v\r]+", " ", line).strip()
        if line:
            lines.append(line)

    title = (parser.title or "").strip()
    if title and (not lines or lines[0] != title):
        lines.insert(0, title)

    return "\n".join(lines)
