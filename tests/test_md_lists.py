from adfwriter.utils.adf_helpers import text_to_adf
from adfwriter.utils.adf_nodes import BulletList, ListItem, OrderedList, Paragraph
from adfwriter.utils.md_blocks import BlockSegmenter


def _paragraph(text: str) -> dict:
    return {'type': 'paragraph', 'content': [{'type': 'text', 'text': text}]}


def _item(*content: dict) -> dict:
    return {'type': 'listItem', 'content': list(content)}


class TestDeeplyNestedLists:
    def test_very_deep_list_converts(self):
        depth = 300
        text = '\n'.join('  ' * level + '- x' for level in range(depth))

        adf = text_to_adf(text)

        node = adf['content'][0]
        levels = 1
        while len(node['content'][0]['content']) == 2:
            assert node['type'] == 'bulletList'
            node = node['content'][0]['content'][1]
            levels += 1

        assert levels == depth
        assert node['content'] == [_item(_paragraph('x'))]


class TestBulletLists:
    def test_flat_list(self):
        adf = text_to_adf('- a\n* b')

        assert adf['content'] == [{'type': 'bulletList', 'content': [_item(_paragraph('a')), _item(_paragraph('b'))]}]

    def test_nested_bullets(self):
        adf = text_to_adf('- a\n  - b')

        assert adf['content'] == [
            {
                'type': 'bulletList',
                'content': [
                    _item(
                        _paragraph('a'),
                        {'type': 'bulletList', 'content': [_item(_paragraph('b'))]},
                    )
                ],
            }
        ]

    def test_tab_counts_as_two_columns(self):
        adf = text_to_adf('- a\n\t- b\n  - c')

        outer_item = adf['content'][0]['content'][0]
        nested = outer_item['content'][1]
        assert nested['type'] == 'bulletList'
        assert nested['content'] == [_item(_paragraph('b')), _item(_paragraph('c'))]

    def test_returning_to_outer_level(self):
        adf = text_to_adf('- a\n  - b\n- c')

        outer = adf['content'][0]
        assert len(adf['content']) == 1
        assert [item['content'][0] for item in outer['content']] == [_paragraph('a'), _paragraph('c')]

    def test_intermediate_indent_opens_sibling_list(self):
        adf = text_to_adf('- a\n    - b\n  - c')

        item = adf['content'][0]['content'][0]
        assert [node['type'] for node in item['content']] == ['paragraph', 'bulletList', 'bulletList']
        assert item['content'][2]['content'] == [_item(_paragraph('c'))]

    def test_unindented_line_closes_list(self):
        adf = text_to_adf('- a\nafterwards')

        assert [node['type'] for node in adf['content']] == ['bulletList', 'paragraph']

    def test_heading_closes_list(self):
        adf = text_to_adf('- a\n# h\n- b')

        assert [node['type'] for node in adf['content']] == ['bulletList', 'heading', 'bulletList']


class TestOrderedLists:
    def test_start_is_preserved(self):
        adf = text_to_adf('5. x\n6. y')

        assert adf['content'] == [
            {
                'type': 'orderedList',
                'content': [_item(_paragraph('x')), _item(_paragraph('y'))],
                'attrs': {'order': 5},
            }
        ]

    def test_start_is_taken_from_first_item_only(self):
        adf = text_to_adf('3. x\n1. y\n9. z')

        assert adf['content'][0]['attrs'] == {'order': 3}
        assert len(adf['content'][0]['content']) == 3

    def test_zero_start(self):
        adf = text_to_adf('0. zero')

        assert adf['content'][0]['attrs'] == {'order': 0}

    def test_number_without_dot_is_a_paragraph(self):
        adf = text_to_adf('2024 was a good year')

        assert adf['content'][0]['type'] == 'paragraph'

    def test_nested_ordered_list_has_its_own_start(self):
        adf = text_to_adf('1. a\n   4. b')

        nested = adf['content'][0]['content'][0]['content'][1]
        assert nested['type'] == 'orderedList'
        assert nested['attrs'] == {'order': 4}


class TestMixedLists:
    def test_switching_kind_at_top_level_starts_new_list(self):
        adf = text_to_adf('- a\n1. b')

        assert [node['type'] for node in adf['content']] == ['bulletList', 'orderedList']

    def test_switching_kind_in_nested_level_creates_sibling_in_parent_item(self):
        adf = text_to_adf('- a\n  - b\n  1. c')

        item = adf['content'][0]['content'][0]
        assert [node['type'] for node in item['content']] == ['paragraph', 'bulletList', 'orderedList']
        assert item['content'][2]['content'] == [_item(_paragraph('c'))]
        assert item['content'][2]['attrs'] == {'order': 1}


class TestListContinuation:
    def test_indented_line_continues_item_with_hard_break(self):
        adf = text_to_adf('- first\n  continued')

        paragraph = adf['content'][0]['content'][0]['content'][0]
        assert paragraph['content'] == [
            {'type': 'text', 'text': 'first'},
            {'type': 'hardBreak'},
            {'type': 'text', 'text': 'continued'},
        ]

    def test_continuation_is_tokenized(self):
        adf = text_to_adf('1. a\n   **b**')

        paragraph = adf['content'][0]['content'][0]['content'][0]
        assert paragraph['content'][-1] == {'type': 'text', 'text': 'b', 'marks': [{'type': 'strong'}]}

    def test_continuation_goes_to_innermost_list(self):
        adf = text_to_adf('- a\n  - b\n    more')

        nested_item = adf['content'][0]['content'][0]['content'][1]['content'][0]
        assert nested_item['content'][0]['content'] == [
            {'type': 'text', 'text': 'b'},
            {'type': 'hardBreak'},
            {'type': 'text', 'text': 'more'},
        ]

    def test_continuation_replaces_placeholder_paragraph(self):
        segmenter = BlockSegmenter()
        outer = segmenter.ensure_list_context('bullet', 0)
        segmenter.ensure_list_context('bullet', 2)
        segmenter.list_stack.pop()

        segmenter._append_continuation(outer, '   filled in')

        paragraph = outer.node.content[0].content[0]
        assert isinstance(paragraph, Paragraph)
        assert not paragraph.is_placeholder()
        assert [getattr(node, 'text', None) for node in paragraph.content] == ['filled in']


class TestListContext:
    def test_nested_list_under_empty_parent_gets_placeholder_item(self):
        segmenter = BlockSegmenter()
        outer = segmenter.ensure_list_context('bullet', 0)
        inner = segmenter.ensure_list_context('ordered', 2, 7)

        assert segmenter.blocks == [outer.node]
        assert outer.node.content == [ListItem(content=[Paragraph.empty(), inner.node])]
        assert inner.node == OrderedList(start=7)
        assert [context.indent for context in segmenter.list_stack] == [0, 2]

    def test_same_kind_and_indent_is_reused(self):
        segmenter = BlockSegmenter()
        first = segmenter.ensure_list_context('bullet', 0)
        second = segmenter.ensure_list_context('bullet', 0)

        assert first is second
        assert segmenter.blocks == [BulletList()]

    def test_deeper_lists_are_closed_first(self):
        segmenter = BlockSegmenter()
        segmenter.ensure_list_context('bullet', 0)
        segmenter.ensure_list_context('bullet', 2)
        segmenter.ensure_list_context('bullet', 4)

        context = segmenter.ensure_list_context('bullet', 2)

        assert [entry.indent for entry in segmenter.list_stack] == [0, 2]
        assert context is segmenter.list_stack[-1]


class TestBlankLinesCloseLists:
    """A blank line closes every open list, not only the innermost one."""

    def test_blank_line_between_items_starts_a_new_list(self):
        adf = text_to_adf('- a\n\n- b')

        assert adf['content'] == [
            {'type': 'bulletList', 'content': [_item(_paragraph('a'))]},
            {'type': 'bulletList', 'content': [_item(_paragraph('b'))]},
        ]

    def test_blank_line_before_nested_item_closes_all_levels(self):
        adf = text_to_adf('- a\n  - b\n\n  - c')

        assert [node['type'] for node in adf['content']] == ['bulletList', 'bulletList']
        assert adf['content'][1]['content'] == [_item(_paragraph('c'))]

    def test_indented_line_after_blank_line_is_a_paragraph(self):
        adf = text_to_adf('- a\n\n  not a continuation')

        assert [node['type'] for node in adf['content']] == ['bulletList', 'paragraph']
