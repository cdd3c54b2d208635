# docengine/markdown/postprocessors/columns_enhancer.py
"""
Postprocessor that finishes multi-column layouts.

The columns shortcode emits nested Pandoc fenced divs, which Pandoc renders as:
    <div class="columns">
        <div class="column"><p>Left</p></div>
        <div class="column"><ul><li>Item</li></ul></div>
    </div>

This postprocessor adds the column count and position so CSS can size them,
and the "list" class to lists that are direct children of a column:
    <div class="columns columns-2" data-columns="2">
        <div class="column column-1"><p>Left</p></div>
        <div class="column column-2"><ul class="list"><li>Item</li></ul></div>
    </div>
"""

from bs4 import BeautifulSoup


def _add_class(tag, name):
    classes = tag.get("class") or []
    if name not in classes:
        classes.append(name)
    tag["class"] = classes


def columns_enhancer(html: str, context: dict) -> str:
    """
    Enhance multi-column layouts with count, position and list classes.

    Args:
        html: HTML string to process
        context: Context dictionary (unused but required for postprocessor signature)

    Returns:
        Processed HTML with enhanced columns
    """
    if "columns" not in html:
        return html

    soup = BeautifulSoup(html, "html.parser")

    for container in soup.find_all("div", class_="columns"):
        column_divs = container.find_all("div", class_="column", recursive=False)
        container["data-columns"] = str(len(column_divs))
        _add_class(container, f"columns-{len(column_divs)}")

        for position, column in enumerate(column_divs, 1):
            _add_class(column, f"column-{position}")
            for list_elem in column.find_all(["ul", "ol"], recursive=False):
                _add_class(list_elem, "list")

    return str(soup)


def columns_enhancer_default(html: str, context: dict) -> str:
    """
    Default configuration for columns_enhancer.

    This is the function that should be registered in POSTPROCESSORS.
    """
    return columns_enhancer(html, context)
