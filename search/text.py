import regex

HEADER = regex.compile(r"^#{1,6}\s+", regex.MULTILINE)
IMAGE = regex.compile(r"!\[([^\]]*)\]\([^)]+\)")
LINK = regex.compile(r"\[([^\]]+)\]\([^)]+\)")
# emphasis only when the markers hug text; "int *a, *b" and "5 * 3" keep their stars
BOLD = regex.compile(r"(?<![\w*])\*\*(?=[^\s*])(.+?)(?<=[^\s*])\*\*(?![\w*])")
ITALIC = regex.compile(r"(?<![\w*])\*(?=[^\s*])(.+?)(?<=[^\s*])\*(?![\w*])")
INLINE_CODE = regex.compile(r"`(.*?)`")
WHITESPACE = regex.compile(r"\s+")
SENTENCE_END = regex.compile(r"[.!?]\s+")

ELLIPSIS = "..."


def strip_markup(text):
    """Drop lightweight markdown so only readable text is matched and shown."""
    if not text:
        return ""

    # images before links, their syntax overlaps
    text = IMAGE.sub("", text)
    text = LINK.sub(r"\1", text)
    text = HEADER.sub("", text)
    text = BOLD.sub(r"\1", text)
    text = ITALIC.sub(r"\1", text)
    text = INLINE_CODE.sub(r"\1", text)
    return WHITESPACE.sub(" ", text).strip()


def fold(text):
    return text.casefold()


def _window_start(text, position, max_chars):
    """Pick a start offset so that position falls inside a max_chars window."""
    if position < max_chars // 2:
        return 0

    lookback = max(0, position - max_chars // 2)
    boundaries = list(SENTENCE_END.finditer(text, lookback, position))
    if boundaries:
        return boundaries[-1].end()

    space = text.find(" ", lookback, position)
    return space + 1 if space != -1 else lookback


def snippet(text, anchor=None, max_chars=120):
    """
    Cut an excerpt of already stripped text of at most max_chars characters.

    When anchor (an offset into text) is given and would fall outside the
    leading window, the excerpt is moved so that it starts at the sentence or
    word boundary before the anchor. Cut ends are marked with an ellipsis.
    """
    text = text or ""
    if len(text) <= max_chars:
        return text

    start = 0 if anchor is None else _window_start(text, min(anchor, len(text)), max_chars)
    end = start + max_chars
    if end < len(text):
        space = text.rfind(" ", start, end)
        if space > start:
            end = space

    excerpt = text[start:end].strip()
    if start > 0:
        excerpt = ELLIPSIS + excerpt
    if end < len(text):
        excerpt += ELLIPSIS
    return excerpt
