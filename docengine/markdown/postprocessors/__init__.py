# docengine/markdown/postprocessors/__init__.py

from .columns_enhancer import columns_enhancer_default

POSTPROCESSORS = [
    columns_enhancer_default,  # Number columns produced by the columns shortcode
    # Order matters - they run sequentially
]


def apply_postprocessors(html, context):
    """Apply all postprocessors in order"""
    for processor in POSTPROCESSORS:
        html = processor(html, context)
    return html
