"""Block-level Markdown segmenter.

Lines are classified one at a time into paragraphs, headings, fenced code, tables, blockquotes and list items. Each
call owns its own paragraph buffer and list-nesting stack, so conversions are independent of each other and safe to
run concurrently.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import Literal

from adfwriter.constants import LOGGER_NAME, MAX_BLOCKQUOTE_DEPTH, TAB_INDENT_WIDTH
from adfwriter.utils.adf_nodes import (
    Block,
    Blockquote,
    BulletList,
    CodeBlock,
    Document,
    HardBreak,
    Heading,
    ListItem,
    ListNode,
    OrderedList,
    Paragraph,
    Table,
    TableCell,
    TableHeader,
    TableRow,
)
from adfwriter.utils.md_inline import tokenize

logger = logging.getLogger(LOGGER_NAME)

CODE_FENCE_START = re.compile(r'^```([\w-]+)?\s*$', re.ASCII)
CODE_FENCE_END = re.compile(r'^\s*```\s*$')
TABLE_SEPARATOR_CELL = re.compile(r'^:?-{3,}:?$')
BLOCKQUOTE_PREFIX = re.compile(r'^\s*>\s?')
HEADING = re.compile(r'^(#{1,6})\s+(.*)$')
BULLET_ITEM = re.compile(r'^(\s*)[-*]\s+(.*)$')
ORDERED_ITEM = re.compile(r'^(\s*)([0-9]+)\.\s+(.*)$')
LEADING_WHITESPACE = re.compile(r'^(\s*)')

ListKind = Literal['bullet', 'ordered']


@dataclass
class ListContext:
    """An open list on the nesting stack."""

    kind: ListKind
    indent: int
    node: ListNode


def build_paragraph(text: str) -> Paragraph:
    """Tokenize text into a paragraph, falling back to the empty placeholder when nothing is extracted."""
    content = tokenize(text)
    return Paragraph(content=content) if content else Paragraph.empty()


def get_line_indent(line: str) -> int:
    """Number of indentation columns of a line; a tab counts as `TAB_INDENT_WIDTH` columns."""
    match = LEADING_WHITESPACE.match(line)
    whitespace = match.group(1) if match else ''
    return len(whitespace.replace('\t', ' ' * TAB_INDENT_WIDTH))


def split_table_row(line: str) -> list[str]:
    trimmed = line.strip()
    if trimmed.startswith('|'):
        trimmed = trimmed[1:]
    if trimmed.endswith('|'):
        trimmed = trimmed[:-1]
    return [cell.strip() for cell in trimmed.split('|')]


def is_table_separator(line: str) -> bool:
    """Check whether a line is a table separator row such as `|---|:---:|`.

    Alignment colons are accepted but not kept.
    """
    cells = split_table_row(line)
    return len(cells) > 0 and all(TABLE_SEPARATOR_CELL.match(cell) for cell in cells)


def build_table(header_line: str, body_lines: list[str]) -> Table:
    """Build a table node out of a header row and its body rows.

    Args:
        header_line: the row above the separator.
        body_lines: the rows below the separator. Rows may have a different number of cells than the header.

    Returns:
        A table whose first row holds `tableHeader` cells and the rest `tableCell` cells.
    """
    header_row = TableRow(
        content=[TableHeader(content=[build_paragraph(cell)]) for cell in split_table_row(header_line)]
    )
    body_rows = [
        TableRow(content=[TableCell(content=[build_paragraph(cell)]) for cell in split_table_row(line)])
        for line in body_lines
    ]
    return Table(content=[header_row, *body_rows])


class BlockSegmenter:
    """Converts Markdown text into a sequence of ADF block nodes.

    An instance is meant to be used for a single call to `segment`; blockquotes are converted with a new instance
    one level deeper. Past `MAX_BLOCKQUOTE_DEPTH` levels, quote markers are kept as paragraph text.
    """

    def __init__(self, depth: int = 0) -> None:
        self.depth = depth
        self.blocks: list[Block] = []
        self.paragraph_lines: list[str] = []
        self.list_stack: list[ListContext] = []

    def segment(self, text: str) -> list[Block]:
        lines = text.replace('\r\n', '\n').split('\n')
        i = 0

        while i < len(lines):
            line = lines[i].rstrip()
            trimmed = line.strip()

            if not trimmed:
                self._flush_paragraph()
                # NOTE: a blank line closes every open list, not only the innermost one.
                self._flush_list_stack()
                i += 1
                continue

            if code_fence := CODE_FENCE_START.match(trimmed):
                i = self._consume_code_block(lines, i, code_fence.group(1))
                continue

            if i + 1 < len(lines) and '|' in trimmed and is_table_separator(lines[i + 1].strip()):
                i = self._consume_table(lines, i, trimmed)
                continue

            if self.depth < MAX_BLOCKQUOTE_DEPTH and BLOCKQUOTE_PREFIX.match(line):
                i = self._consume_blockquote(lines, i)
                continue

            if heading := HEADING.match(trimmed):
                self._flush_paragraph()
                self._flush_list_stack()
                self.blocks.append(
                    Heading(level=len(heading.group(1)), content=tokenize(heading.group(2)))
                )
                i += 1
                continue

            if bullet := BULLET_ITEM.match(line):
                self._flush_paragraph()
                context = self.ensure_list_context('bullet', get_line_indent(bullet.group(1)))
                context.node.content.append(ListItem(content=[build_paragraph(bullet.group(2))]))
                i += 1
                continue

            if ordered := ORDERED_ITEM.match(line):
                self._flush_paragraph()
                context = self.ensure_list_context(
                    'ordered', get_line_indent(ordered.group(1)), int(ordered.group(2))
                )
                context.node.content.append(ListItem(content=[build_paragraph(ordered.group(3))]))
                i += 1
                continue

            if self.list_stack:
                top = self.list_stack[-1]
                if get_line_indent(line) > top.indent:
                    self._append_continuation(top, line)
                    i += 1
                    continue

                self._flush_list_stack()

            self.paragraph_lines.append(trimmed)
            i += 1

        self._flush_paragraph()
        self._flush_list_stack()

        if not self.blocks:
            return [Paragraph.empty()]

        return self.blocks

    def ensure_list_context(self, kind: ListKind, indent: int, start: int | None = None) -> ListContext:
        """Find or open the list that an item at the given indentation belongs to.

        Deeper lists are closed first. A list of the same kind at the same indentation is reused. Otherwise a new list
        is opened, nested in the last item of the closest shallower list. Switching between bullet and ordered items
        at the same indentation replaces the open list with a sibling inside the same parent item.

        Args:
            kind: `bullet` or `ordered`.
            indent: the indentation of the list item marker.
            start: the number of the first item of an ordered list.

        Returns:
            The context of the list the item must be appended to.
        """
        while self.list_stack and self.list_stack[-1].indent > indent:
            self.list_stack.pop()

        current = self.list_stack[-1] if self.list_stack else None
        if current and current.indent == indent and current.kind == kind:
            return current

        parent: ListContext | None = None
        if current and current.indent < indent:
            parent = current
        elif current and current.indent == indent:
            self.list_stack.pop()
            parent = self.list_stack[-1] if self.list_stack else None

        node: ListNode = BulletList() if kind == 'bullet' else OrderedList(start=start)

        if parent is None:
            self.blocks.append(node)
        else:
            if not parent.node.content:
                parent.node.content.append(ListItem(content=[Paragraph.empty()]))
            parent.node.content[-1].content.append(node)

        context = ListContext(kind=kind, indent=indent, node=node)
        self.list_stack.append(context)
        return context

    def _append_continuation(self, context: ListContext, line: str) -> None:
        if not context.node.content:
            context.node.content.append(ListItem(content=[Paragraph.empty()]))
        item = context.node.content[-1]

        paragraph = item.content[0] if item.content else None
        if not isinstance(paragraph, Paragraph):
            paragraph = Paragraph.empty()
            item.content.insert(0, paragraph)

        inline = tokenize(line.strip())
        if not inline:
            return

        if paragraph.is_placeholder():
            paragraph.content = inline
            return

        paragraph.content.append(HardBreak())
        paragraph.content.extend(inline)

    def _consume_code_block(self, lines: list[str], index: int, language: str | None) -> int:
        self._flush_paragraph()
        self._flush_list_stack()

        code_lines: list[str] = []
        index += 1
        while index < len(lines) and not CODE_FENCE_END.match(lines[index]):
            code_lines.append(lines[index])
            index += 1

        self.blocks.append(CodeBlock(text='\n'.join(code_lines), language=language))
        # skip the closing fence; an unterminated fence already reached the end of the input
        return index + 1

    def _consume_table(self, lines: list[str], index: int, header_line: str) -> int:
        self._flush_paragraph()
        self._flush_list_stack()

        body_lines: list[str] = []
        cursor = index + 2
        while cursor < len(lines):
            row = lines[cursor].strip()
            if not row or '|' not in row:
                break
            body_lines.append(row)
            cursor += 1

        self.blocks.append(build_table(header_line, body_lines))
        return cursor

    def _consume_blockquote(self, lines: list[str], index: int) -> int:
        self._flush_paragraph()
        self._flush_list_stack()

        quote_lines: list[str] = []
        cursor = index
        while cursor < len(lines) and BLOCKQUOTE_PREFIX.match(lines[cursor]):
            quote_lines.append(BLOCKQUOTE_PREFIX.sub('', lines[cursor], count=1))
            cursor += 1

        content = BlockSegmenter(depth=self.depth + 1).segment('\n'.join(quote_lines))
        self.blocks.append(Blockquote(content=content))
        return cursor

    def _flush_paragraph(self) -> None:
        if not self.paragraph_lines:
            return
        content = ' '.join(self.paragraph_lines).strip()
        if content:
            self.blocks.append(build_paragraph(content))
        self.paragraph_lines = []

    def _flush_list_stack(self) -> None:
        self.list_stack.clear()


def segment(text: str) -> list[Block]:
    """Split Markdown text into ADF block nodes.

    Never fails: malformed or ambiguous input degrades to plain paragraphs, and an input without any content produces a
    single empty paragraph.
    """
    return BlockSegmenter().segment(text)


def markdown_to_document(text: str) -> Document:
    """Convert Markdown text into an ADF document tree.

    Args:
        text: Markdown or plain text string.

    Returns:
        The ADF document; it always holds at least one block.
    """
    blocks = segment(text)
    logger.debug(f'Converted {len(text)} characters of Markdown into {len(blocks)} ADF blocks')
    return Document(content=tuple(blocks))
