"""Markdown-to-HTML conversion for chat bubbles."""

import html
import re

_UL_ITEM = re.compile(r"^[-*]\s+")
_OL_ITEM = re.compile(r"^\d+\.\s+")
_CODE_BLOCK = re.compile(r"```(\w*)\n?([\s\S]*?)```")
_INLINE_CODE = re.compile(r"`([^`]+)`")

# Placeholder for code set aside during conversion
_SLOT = "\x00"
_SLOT_REF = re.compile(r"\x00(\d+)\x00")


def _wrap_lists(text: str, item: re.Pattern[str], tag: str, classes: str) -> str:
    """Group consecutive list-item lines into a single <ul>/<ol> block."""
    result: list[str] = []
    in_list = False
    for line in text.split("\n"):
        stripped = line.strip()
        if item.match(stripped):
            if not in_list:
                result.append(f'<{tag} class="{classes}">')
                in_list = True
            result.append(f"<li>{item.sub('', stripped)}</li>")
            continue
        if in_list:
            result.append(f"</{tag}>")
            in_list = False
        result.append(line)
    if in_list:
        result.append(f"</{tag}>")
    return "\n".join(result)


def markdown_to_html(text: str) -> str:
    """Convert markdown to HTML for chat display.

    Supports: bold, italic, inline code, code blocks, links, lists.
    Code is set aside before the inline passes so its contents stay literal.
    """
    # quote=True keeps link URLs from closing the href attribute
    text = html.escape(text.replace(_SLOT, ""), quote=True)
    code: list[str] = []

    def set_aside(fragment: str) -> str:
        code.append(fragment)
        return f"{_SLOT}{len(code) - 1}{_SLOT}"

    text = _CODE_BLOCK.sub(
        lambda m: set_aside(
            '<pre class="bg-zinc-950 text-zinc-100 rounded-lg p-3 my-2 overflow-x-auto text-xs">'
            f"<code>{m.group(2)}</code></pre>"
        ),
        text,
    )
    text = _INLINE_CODE.sub(
        lambda m: set_aside(
            '<code class="bg-zinc-800 text-orange-300 px-1.5 py-0.5 rounded text-xs">'
            f"{m.group(1)}</code>"
        ),
        text,
    )

    text = re.sub(r"\*\*(.+?)\*\*", r"<strong>\1</strong>", text)
    text = re.sub(r"__(.+?)__", r"<strong>\1</strong>", text)
    text = re.sub(r"\*([^*\n]+)\*", r"<em>\1</em>", text)
    text = re.sub(r"(?<!\w)_([^_\n]+)_(?!\w)", r"<em>\1</em>", text)

    text = re.sub(
        r"\[([^\]]+)\]\((https?://[^)\s\"]+)\)",
        r'<a href="\2" class="text-orange-400 underline" target="_blank" rel="noopener noreferrer">\1</a>',
        text,
    )

    text = _wrap_lists(text, _UL_ITEM, "ul", "list-disc list-inside my-2 space-y-1")
    text = _wrap_lists(text, _OL_ITEM, "ol", "list-decimal list-inside my-2 space-y-1")

    text = text.replace("\n", "<br>")
    return _SLOT_REF.sub(lambda m: code[int(m.group(1))], text)


def plain_to_html(text: str) -> str:
    """Escape user text and keep its line breaks."""
    return html.escape(text, quote=False).replace("\n", "<br>")
