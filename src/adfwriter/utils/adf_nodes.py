"""Node types of the Atlassian Document Format (ADF) tree produced by the converter.

Every node kind is its own dataclass; the `Mark`, `Inline` and `Block` unions list the closed set of variants. Use
`node_to_adf` to serialize any of them into the dictionaries the Jira REST API expects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Sequence, Union

from adfwriter.constants import ADF_VERSION, TABLE_LAYOUT


@dataclass(frozen=True)
class StrongMark:
    type: ClassVar[str] = 'strong'


@dataclass(frozen=True)
class EmMark:
    type: ClassVar[str] = 'em'


@dataclass(frozen=True)
class StrikeMark:
    type: ClassVar[str] = 'strike'


@dataclass(frozen=True)
class CodeMark:
    type: ClassVar[str] = 'code'


@dataclass(frozen=True)
class LinkMark:
    href: str
    type: ClassVar[str] = 'link'


Mark = Union[StrongMark, EmMark, StrikeMark, CodeMark, LinkMark]


@dataclass(frozen=True)
class Text:
    text: str
    marks: tuple[Mark, ...] = ()
    type: ClassVar[str] = 'text'


@dataclass(frozen=True)
class HardBreak:
    type: ClassVar[str] = 'hardBreak'


Inline = Union[Text, HardBreak]


@dataclass
class Paragraph:
    content: list[Inline] = field(default_factory=list)
    type: ClassVar[str] = 'paragraph'

    @classmethod
    def empty(cls) -> Paragraph:
        """A paragraph holding the single empty text node used as a placeholder."""
        return cls(content=[Text('')])

    def is_placeholder(self) -> bool:
        return (
            len(self.content) == 1
            and isinstance(self.content[0], Text)
            and self.content[0].text == ''
        )


@dataclass
class Heading:
    level: int
    content: list[Inline] = field(default_factory=list)
    type: ClassVar[str] = 'heading'


@dataclass
class CodeBlock:
    text: str
    language: str | None = None
    type: ClassVar[str] = 'codeBlock'


@dataclass
class Blockquote:
    content: list[Block] = field(default_factory=list)
    type: ClassVar[str] = 'blockquote'


@dataclass
class ListItem:
    content: list[Block] = field(default_factory=list)
    type: ClassVar[str] = 'listItem'


@dataclass
class BulletList:
    content: list[ListItem] = field(default_factory=list)
    type: ClassVar[str] = 'bulletList'


@dataclass
class OrderedList:
    content: list[ListItem] = field(default_factory=list)
    start: int | None = None
    type: ClassVar[str] = 'orderedList'


@dataclass
class TableHeader:
    content: list[Paragraph] = field(default_factory=list)
    type: ClassVar[str] = 'tableHeader'


@dataclass
class TableCell:
    content: list[Paragraph] = field(default_factory=list)
    type: ClassVar[str] = 'tableCell'


@dataclass
class TableRow:
    content: list[TableHeader | TableCell] = field(default_factory=list)
    type: ClassVar[str] = 'tableRow'


@dataclass
class Table:
    content: list[TableRow] = field(default_factory=list)
    type: ClassVar[str] = 'table'


Block = Union[
    Paragraph,
    Heading,
    CodeBlock,
    Blockquote,
    BulletList,
    OrderedList,
    ListItem,
    Table,
    TableRow,
    TableHeader,
    TableCell,
]

ListNode = Union[BulletList, OrderedList]


@dataclass(frozen=True)
class Document:
    """The root of a converted document.

    Only the document itself is frozen. The block nodes it holds are plain dataclasses filled in while segmenting and
    must be treated as read-only once the document is returned.
    """

    content: tuple[Block, ...]
    version: int = ADF_VERSION
    type: ClassVar[str] = 'doc'

    def as_dict(self) -> dict:
        """Dumps the document into the ADF dictionary structure."""
        return node_to_adf(self)


def mark_to_adf(mark: Mark) -> dict[str, Any]:
    if isinstance(mark, LinkMark):
        return {'type': mark.type, 'attrs': {'href': mark.href}}
    if isinstance(mark, (StrongMark, EmMark, StrikeMark, CodeMark)):
        return {'type': mark.type}
    raise TypeError(f'Unsupported ADF mark: {mark!r}')


def _node_shell(node: Document | Block | Inline) -> tuple[dict[str, Any], Sequence[Block | Inline]]:
    """Serialize a single node with an empty `content` list, returning the children still to be serialized."""
    if isinstance(node, Document):
        return {'type': node.type, 'version': node.version, 'content': []}, node.content

    if isinstance(node, Text):
        text_node: dict[str, Any] = {'type': node.type, 'text': node.text}
        if node.marks:
            text_node['marks'] = [mark_to_adf(mark) for mark in node.marks]
        return text_node, ()

    if isinstance(node, HardBreak):
        return {'type': node.type}, ()

    if isinstance(node, Heading):
        return {'type': node.type, 'attrs': {'level': node.level}, 'content': []}, node.content

    if isinstance(node, CodeBlock):
        code_node: dict[str, Any] = {'type': node.type}
        if node.language:
            code_node['attrs'] = {'language': node.language}
        code_node['content'] = [{'type': 'text', 'text': node.text}]
        return code_node, ()

    if isinstance(node, OrderedList):
        list_node: dict[str, Any] = {'type': node.type, 'content': []}
        if node.start is not None:
            list_node['attrs'] = {'order': node.start}
        return list_node, node.content

    if isinstance(node, Table):
        return {
            'type': node.type,
            'attrs': {'isNumberColumnEnabled': False, 'layout': TABLE_LAYOUT},
            'content': [],
        }, node.content

    if isinstance(
        node,
        (Paragraph, Blockquote, BulletList, ListItem, TableRow, TableHeader, TableCell),
    ):
        return {'type': node.type, 'content': []}, node.content

    raise TypeError(f'Unsupported ADF node: {node!r}')


def node_to_adf(node: Document | Block | Inline) -> dict[str, Any]:
    """Serialize a node and all of its descendants into ADF dictionaries.

    The tree is walked with an explicit stack, so arbitrarily deep lists serialize without hitting the recursion limit.

    Args:
        node: any node of the tree, usually the `Document`.

    Returns:
        A dictionary ready to be dumped to JSON.

    Raises:
        TypeError: if the node is not one of the known ADF variants.
    """
    root, children = _node_shell(node)
    pending = [(root, children)]

    while pending:
        parent, children = pending.pop()
        for child in children:
            child_node, grandchildren = _node_shell(child)
            parent['content'].append(child_node)
            if grandchildren:
                pending.append((child_node, grandchildren))

    return root
