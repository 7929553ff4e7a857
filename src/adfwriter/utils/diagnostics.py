import re

from adfwriter.constants import WARNING_SNIPPET_LENGTH
from adfwriter.utils.md_blocks import CODE_FENCE_END, CODE_FENCE_START

INCOMPLETE_LINK = re.compile(r'\[[^\]]+\](?!\()')
TASK_MARKER = re.compile(r'^(?:[-*]\s+)?\[([ xX])\](\s|$)')
MALFORMED_RULE = re.compile(r'^(-{3,}|_{3,}|\*{3,})[^\s\-_*]')


def _check_line(line_num: int, line: str) -> list[str]:
    warnings = []
    text_content = line.strip()
    snippet = text_content[:WARNING_SNIPPET_LENGTH]

    if text_content.count('**') % 2 != 0:
        warnings.append(f'Line {line_num}: Unclosed bold marker (**) in "{snippet}"')

    if text_content.count('`') % 2 != 0:
        warnings.append(f'Line {line_num}: Unclosed code marker (`) in "{snippet}"')

    if INCOMPLETE_LINK.search(text_content) and not TASK_MARKER.match(text_content):
        warnings.append(f'Line {line_num}: Incomplete link syntax - missing URL in "{snippet}"')

    if MALFORMED_RULE.match(text_content):
        warnings.append(
            f'Line {line_num}: Malformed horizontal rule - "{text_content}" '
            f'(should be "---", "***", or "___" alone on a line)'
        )

    return warnings


def detect_malformed_markdown(text: str) -> list[str]:
    """Detect Markdown that will most likely be converted to plain text instead of what the author meant.

    The conversion itself never fails; these warnings only help users spot typos such as an unclosed `**`. Lines
    inside fenced code blocks are not checked.

    Args:
        text: The Markdown text to check

    Returns:
        List of warning messages for detected malformed syntax
    """
    warnings: list[str] = []
    lines = text.replace('\r\n', '\n').split('\n')
    fence_opened_at: int | None = None

    for index, line in enumerate(lines):
        line_num = index + 1

        if fence_opened_at is not None:
            if CODE_FENCE_END.match(line):
                fence_opened_at = None
            continue

        if CODE_FENCE_START.match(line.strip()):
            fence_opened_at = line_num
            continue

        warnings.extend(_check_line(line_num, line))

    if fence_opened_at is not None:
        warnings.append(f'Line {fence_opened_at}: Unterminated code fence')

    return warnings
