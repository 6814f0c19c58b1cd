"""
Text cleanup applied to every raw query and fragment before it is emitted.

The generated collections store each definition as one logical line, the way
the consuming runtime sends it over the wire:

1. # comments running to a line break are dropped (a comment left on the
   joined line would swallow everything after it); a # inside a string
   literal is kept,
2. line breaks become single spaces (so field1\\nfield2 never collapses into
   field1field2),
3. runs of spaces collapse to one space,
4. a __typename meta-field is added before the closing brace of every
   selection set, matching what the Apollo client cache adds on its own
   (https://github.com/apollographql/apollo-client/issues/11028). The
   top-level closing brace of a fragment is left alone, since the fragment
   is spread into a selection set that already receives one.

Running normalize on its own output is not a no-op: the typename stage adds a
second __typename before every brace. Callers normalize raw text exactly once.
"""

import re
from dataclasses import dataclass
from typing import Optional

# String literals are matched first and kept; group 1 is only set for them
COMMENT_REGEX = re.compile(
    r'("""[\s\S]*?"""|"(?:\\.|[^"\\\r\n])*")|#[^\r\n]*(?=\r\n|\n|\r)'
)
LINE_BREAK_REGEX = re.compile(r"(\r\n|\n|\r)")
# Every space that is followed by another space
EXTRA_SPACE_REGEX = re.compile(r" +(?= )")
FRAGMENT_HEAD_REGEX = re.compile(r"^\s*fragment\b")

TYPENAME_FIELD = "__typename"


@dataclass(frozen=True)
class NormalizeResult:
    """Outcome of normalize: the cleaned text, or the input and why it failed."""

    ok: bool
    value: str
    error: Optional[str] = None


def remove_comments(query: str) -> str:
    return COMMENT_REGEX.sub(lambda m: m.group(1) or "", query)


def remove_line_breaks(query: str) -> str:
    return LINE_BREAK_REGEX.sub(" ", query)


def remove_unnecessary_spaces(query: str) -> str:
    return EXTRA_SPACE_REGEX.sub("", query)


def add_typename_field(query: str) -> str:
    """
    Insert __typename before the closing brace of every selection set.

    Braces strictly between the first '{' and the last '}' always gain the
    field. The last '}' gains it too unless the text is a fragment
    definition. Text without a usable brace pair is returned unchanged.
    """
    first_index = query.find("{")
    last_index = query.rfind("}")
    if first_index == -1 or last_index == -1 or last_index < first_index:
        return query

    pre = query[: first_index + 1]
    body = query[first_index + 1 : last_index]
    post = query[last_index:]

    body = body.replace("}", f"{TYPENAME_FIELD} }}")
    if not FRAGMENT_HEAD_REGEX.match(pre):
        if body and not body.endswith(" "):
            body += " "
        body += f"{TYPENAME_FIELD} "
    return pre + body + post


def normalize(raw: str) -> NormalizeResult:
    """
    Run the cleanup stages in order.

    Never raises; a failure is reported through the result with the original
    input as its value.
    """
    try:
        query = remove_comments(raw)
        query = remove_line_breaks(query)
        query = remove_unnecessary_spaces(query)
        query = add_typename_field(query)
    except Exception as e:
        return NormalizeResult(
            ok=False,
            value=raw,
            error=f"error occurred when cleaning up query: {e}",
        )
    return NormalizeResult(ok=True, value=query)
