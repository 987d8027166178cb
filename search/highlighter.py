import html
from typing import List, Sequence, Tuple, Union

import regex

from search.parser import FieldClause, ParsedQuery, Term
from search.text import fold, snippet, strip_markup

MARK_OPEN = "<mark>"
MARK_CLOSE = "</mark>"
SNIPPET_CHARS = 120

Span = Tuple[int, int]


def extract_terms(query: ParsedQuery) -> List[str]:
    """
    Terms worth highlighting: words, phrases and quoted field values.

    Field names, operators, range/date/sort directives and excluded terms never
    show up here. Duplicates (ignoring case) are dropped, first one wins.
    """
    terms = []
    seen = set()
    for clause in query.clauses():
        if isinstance(clause, Term):
            term = clause.text
        elif isinstance(clause, FieldClause) and clause.quoted:
            term = clause.value
        else:
            continue
        key = fold(term)
        if key not in seen:
            seen.add(key)
            terms.append(term)
    return terms


def _fold_with_offsets(text):
    """
    Casefold text the way the matcher does, one character at a time, keeping
    for each folded character the index of the original character it came from.
    """
    folded = []
    offsets = []
    for i, ch in enumerate(text):
        f = fold(ch)
        folded.append(f)
        offsets.extend([i] * len(f))
    return "".join(folded), offsets


def highlight_spans(text: str, terms: Sequence[str]) -> List[Span]:
    """
    Literal matches of terms in text, merged into disjoint spans.

    Matching runs on casefolded text so that every article the matcher accepts
    for a term gets that term highlighted. Spans point into the original text.
    """
    if not text:
        return []

    folded, offsets = _fold_with_offsets(text)
    found = []
    for term in terms:
        pattern = regex.escape(fold(term))
        if not pattern:
            continue
        for match in regex.finditer(pattern, folded, overlapped=True):
            if match.end() > match.start():
                found.append((offsets[match.start()], offsets[match.end() - 1] + 1))

    found.sort()
    merged: List[Span] = []
    for start, end in found:
        if merged and start <= merged[-1][1]:
            merged[-1] = (merged[-1][0], max(merged[-1][1], end))
        else:
            merged.append((start, end))
    return merged


def mark(text, spans, open_tag=MARK_OPEN, close_tag=MARK_CLOSE, escape=False):
    quote = html.escape if escape else (lambda s: s)
    if not spans:
        return quote(text)

    parts = []
    pos = 0
    for start, end in spans:
        parts.append(quote(text[pos:start]))
        parts.append(open_tag + quote(text[start:end]) + close_tag)
        pos = end
    parts.append(quote(text[pos:]))
    return "".join(parts)


def highlight(text: str, query: Union[ParsedQuery, Sequence[str]], escape=False) -> str:
    """
    Wrap every occurrence of the query's highlightable terms in <mark> tags.

    Overlapping occurrences become one span, so markers never nest. Text is
    returned unchanged when there is nothing to highlight (unless escape is set,
    in which case it is HTML-escaped).
    """
    terms = extract_terms(query) if isinstance(query, ParsedQuery) else list(query)
    return mark(text, highlight_spans(text, terms), escape=escape)


def highlight_snippet(text: str, terms: Sequence[str], max_chars=SNIPPET_CHARS, escape=False) -> str:
    """Markup-free excerpt of text around the first match, with terms highlighted."""
    plain = strip_markup(text)
    spans = highlight_spans(plain, terms)
    excerpt = snippet(plain, anchor=spans[0][0] if spans else None, max_chars=max_chars)
    return mark(excerpt, highlight_spans(excerpt, terms), escape=escape)
