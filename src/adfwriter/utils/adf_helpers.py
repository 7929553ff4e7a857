from typing import cast

from adfwriter.exceptions import EmptyContentError
from adfwriter.utils.diagnostics import detect_malformed_markdown
from adfwriter.utils.md_blocks import markdown_to_document


def text_to_adf(text: str, track_warnings: bool = False) -> dict | tuple[dict, list[str]]:
    """Convert markdown text to ADF (Atlassian Document Format).

    Args:
        text: Markdown or plain text string
        track_warnings: If True, returns tuple of (adf_dict, warnings_list)

    Returns:
        ADF document structure, or tuple of (ADF document, list of warning messages) if track_warnings=True
    """
    result = markdown_to_document(text).as_dict()
    if track_warnings:
        return result, detect_malformed_markdown(text)
    return result


def build_payload_to_add_comment(message: str) -> dict:
    """Build payload for adding a comment, converting markdown to ADF.

    Args:
        message: Markdown text to convert to ADF

    Returns:
        Dictionary with ADF body structure

    Raises:
        EmptyContentError: if the message is empty or only holds whitespace.
    """
    content = message.strip()
    if not content:
        raise EmptyContentError('Comment text cannot be empty')

    return {'body': cast(dict, text_to_adf(content))}


def build_payload_to_update_description(description: str) -> dict:
    """Build payload for replacing the description of a work item, converting markdown to ADF.

    Args:
        description: Markdown text to convert to ADF

    Returns:
        Dictionary with the ADF document under `fields.description`

    Raises:
        EmptyContentError: if the description is empty or only holds whitespace.
    """
    content = description.strip()
    if not content:
        raise EmptyContentError('Description text cannot be empty')

    return {'fields': {'description': cast(dict, text_to_adf(content))}}
