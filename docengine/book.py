"""
mdBook integration: run shortcode substitution over every chapter of a book.

mdBook hands preprocessors a JSON array [context, book] on stdin and expects
the (modified) book back on stdout. The book looks like:

    {"sections": [
        {"Chapter": {"name": "Intro", "content": "...", "path": "intro.md",
                     "sub_items": [...]}},
        {"PartTitle": "Reference"},
        "Separator"
    ]}

Only the html renderer is supported: the built-in handlers emit HTML and
Pandoc fenced divs.
"""

import logging
from typing import Any, Dict, Iterator, Optional

from .markdown.config import build_registry, get_substitution_policy
from .markdown.shortcodes import (
    BookProcessingError,
    ShortcodeProcessingError,
    ShortcodeProcessor,
    ShortcodeRegistry,
    SubstitutionPolicy,
)

logger = logging.getLogger(__name__)

SUPPORTED_RENDERERS = ("html",)


def iter_chapters(items) -> Iterator[Dict[str, Any]]:
    """Yield every chapter dict of a section list, depth first."""
    for item in items or []:
        if not isinstance(item, dict):
            continue  # "Separator"
        if "Chapter" in item:
            chapter = item["Chapter"]
            yield chapter
            yield from iter_chapters(chapter.get("sub_items"))
        elif "PartTitle" in item and isinstance(item["PartTitle"], dict):
            yield from iter_chapters(item["PartTitle"].get("sub_items"))


def chapter_id(chapter: Dict[str, Any]) -> str:
    return chapter.get("path") or chapter.get("source_path") or chapter.get("name") or "<chapter>"


class ShortcodesPreprocessor:
    name = "shortcodes"

    def __init__(
        self,
        registry: Optional[ShortcodeRegistry] = None,
        policy: Optional[SubstitutionPolicy] = None,
    ):
        self.processor = ShortcodeProcessor(
            registry if registry is not None else build_registry(),
            policy if policy is not None else get_substitution_policy(),
        )
        self.diagnostics = []

    def supports_renderer(self, renderer: str) -> bool:
        return renderer in SUPPORTED_RENDERERS

    def run(self, context: Optional[dict], book: dict) -> dict:
        """
        Substitute shortcodes in every chapter of book, in place.

        Chapters that fail keep their original content. After the whole
        book has been walked, BookProcessingError lists every failure.
        """
        self.diagnostics = []
        failures = []
        chapters = 0

        for chapter in iter_chapters(book.get("sections")):
            chapters += 1
            document_id = chapter_id(chapter)
            try:
                result = self.processor.process(chapter.get("content", ""), document_id)
            except ShortcodeProcessingError as e:
                for diagnostic in e.diagnostics:
                    logger.error(f"{diagnostic}")
                self.diagnostics.extend(e.diagnostics)
                failures.append(e)
                continue

            for diagnostic in result.diagnostics:
                logger.warning(f"{diagnostic}")
            self.diagnostics.extend(result.diagnostics)
            chapter["content"] = result.text

        logger.info(
            f"Processed {chapters} chapter(s): {len(self.diagnostics)} diagnostic(s), "
            f"{len(failures)} failure(s)"
        )
        if failures:
            raise BookProcessingError(failures)
        return book
