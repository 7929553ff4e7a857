"""Inline Markdown tokenizer.

Turns a single logical line into ADF text nodes. Each recognised span carries exactly one mark; nested or overlapping
markup is not composed.
"""

from __future__ import annotations

import re
from typing import Callable, NamedTuple

from adfwriter.utils.adf_nodes import (
    CodeMark,
    EmMark,
    Inline,
    LinkMark,
    Mark,
    StrikeMark,
    StrongMark,
    Text,
)


class InlinePattern(NamedTuple):
    regex: re.Pattern[str]
    build_mark: Callable[[re.Match[str]], Mark]


# NOTE: order matters, `**` must be tried before `*` and `__` before `_`.
INLINE_PATTERNS: tuple[InlinePattern, ...] = (
    InlinePattern(re.compile(r'~~([^~]+)~~'), lambda match: StrikeMark()),
    InlinePattern(re.compile(r'\*\*([^*]+)\*\*'), lambda match: StrongMark()),
    InlinePattern(re.compile(r'\*([^*]+)\*'), lambda match: EmMark()),
    InlinePattern(re.compile(r'__([^_]+)__'), lambda match: StrongMark()),
    InlinePattern(re.compile(r'_([^_]+)_'), lambda match: EmMark()),
    InlinePattern(re.compile(r'`([^`]+)`'), lambda match: CodeMark()),
    InlinePattern(re.compile(r'\[([^\]]+)\]\(([^)]+)\)'), lambda match: LinkMark(href=match.group(2))),
)

SPECIAL_CHARACTERS = re.compile(r'~~|\*|_|`|\[|\]')


def _match_pattern(text: str, position: int) -> tuple[Text, int] | None:
    for pattern in INLINE_PATTERNS:
        if match := pattern.regex.match(text, position):
            return Text(match.group(1), (pattern.build_mark(match),)), match.end()
    return None


def tokenize(line: str) -> list[Inline]:
    """Convert a line of Markdown into ADF inline nodes.

    Args:
        line: the text of a paragraph, heading, table cell or list item.

    Returns:
        The inline nodes in source order. An empty line produces an empty list.
    """
    nodes: list[Inline] = []
    position = 0

    while position < len(line):
        if matched := _match_pattern(line, position):
            node, position = matched
            nodes.append(node)
            continue

        special = SPECIAL_CHARACTERS.search(line, position)
        if special is None:
            nodes.append(Text(line[position:]))
            break

        if special.start() == position:
            nodes.append(Text(line[position]))
            position += 1
        else:
            nodes.append(Text(line[position : special.start()]))
            position = special.start()

    return nodes
