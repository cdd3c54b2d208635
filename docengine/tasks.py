"""
Celery tasks for processing documents in parallel workers.

Each task builds its own registry from settings, so workers never share
handler state.
"""

import logging

from celery import shared_task

from .markdown.config import build_registry, get_substitution_policy
from .markdown.shortcodes import ShortcodeProcessingError, process

logger = logging.getLogger(__name__)


@shared_task
def process_document_async(text, document_id=None):
    """
    Substitute shortcodes in one document.

    Args:
        text: Raw markdown of the document
        document_id: Path or title used in diagnostics

    Returns:
        Dict with keys success, document_id, content (None on failure) and
        diagnostics (list of dicts)
    """
    try:
        result = process(
            text,
            build_registry(),
            document_id=document_id,
            policy=get_substitution_policy(),
        )
    except ShortcodeProcessingError as e:
        logger.warning(f"Shortcode substitution failed for {document_id}: {e}")
        return {
            "success": False,
            "document_id": document_id,
            "content": None,
            "diagnostics": [d.as_dict() for d in e.diagnostics],
        }

    return {
        "success": True,
        "document_id": document_id,
        "content": result.text,
        "diagnostics": [d.as_dict() for d in result.diagnostics],
    }
