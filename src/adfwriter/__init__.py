from adfwriter.utils.adf_helpers import text_to_adf
from adfwriter.utils.md_blocks import markdown_to_document

__all__ = ['markdown_to_document', 'text_to_adf']
