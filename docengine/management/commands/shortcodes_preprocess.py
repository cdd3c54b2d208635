"""
Management command implementing the mdBook preprocessor protocol.

book.toml:

    [preprocessor.shortcodes]
    command = "python manage.py shortcodes_preprocess"

mdBook first runs `... shortcodes_preprocess supports <renderer>` and checks
the exit code, then pipes [context, book] JSON on stdin and reads the book
back from stdout.
"""

import json
import sys

from django.core.management.base import BaseCommand, CommandError

from docengine.book import ShortcodesPreprocessor
from docengine.markdown.config import get_substitution_policy
from docengine.markdown.shortcodes import BookProcessingError


class Command(BaseCommand):
    help = 'Expand shortcodes in an mdBook book read from stdin'
    stealth_options = ('stdin',)

    def add_arguments(self, parser):
        parser.add_argument(
            'action',
            nargs='*',
            help='"supports <renderer>" to ask whether a renderer is supported',
        )
        parser.add_argument(
            '--strict',
            action='store_true',
            help='Treat every shortcode problem as a hard failure',
        )

    def handle(self, *args, **options):
        action = options.get('action') or []
        preprocessor = ShortcodesPreprocessor(
            policy=get_substitution_policy(strict=options.get('strict')),
        )

        if action:
            if action[0] != 'supports' or len(action) != 2:
                raise CommandError('Usage: shortcodes_preprocess [supports <renderer>]')
            renderer = action[1]
            if not preprocessor.supports_renderer(renderer):
                raise CommandError(
                    f"Renderer '{renderer}' is not supported by {preprocessor.name}",
                    returncode=1,
                )
            return

        stdin = options.get('stdin') or sys.stdin
        try:
            payload = json.load(stdin)
        except json.JSONDecodeError as e:
            raise CommandError(f'Invalid mdBook input: {e}') from e

        if not isinstance(payload, list) or len(payload) != 2:
            raise CommandError('Expected a JSON array [context, book] on stdin')
        context, book = payload

        renderer = (context or {}).get('renderer')
        if renderer and not preprocessor.supports_renderer(renderer):
            self.stderr.write(f'Renderer {renderer} not supported, passing book through')
        else:
            try:
                preprocessor.run(context, book)
            except BookProcessingError as e:
                for diagnostic in preprocessor.diagnostics:
                    self.stderr.write(str(diagnostic))
                raise CommandError(str(e)) from e

            for diagnostic in preprocessor.diagnostics:
                self.stderr.write(self.style.WARNING(str(diagnostic)))

        self.stdout.write(json.dumps(book), ending='')
