# docengine/markdown/shortcodes/handlers/figure.py
"""
Numbered figure shortcode.

    {{% figure "img/pipeline.png" "The build pipeline" width=600 %}}

becomes

    <figure class="figure" id="figure-1"><img alt="The build pipeline"
    src="img/pipeline.png" width="600"/><figcaption>Figure 1: The build
    pipeline</figcaption></figure>

Figures are numbered in document order. The counter lives in the
invocation state, which is reset for every document.
"""

from bs4 import BeautifulSoup

from ..diagnostics import ShortcodeHandlerError


def figure(invocation) -> str:
    src = invocation.get("src", 0)
    if not src:
        raise ShortcodeHandlerError("figure needs an image source")

    caption = invocation.get("caption", 1, "")
    width = invocation.get("width")
    if width is not None and not width.isdigit():
        raise ShortcodeHandlerError(f"figure width must be a number of pixels, got {width!r}")

    number = invocation.state.get("count", 0) + 1
    invocation.state["count"] = number

    soup = BeautifulSoup("", "html.parser")
    figure_tag = soup.new_tag("figure", id=invocation.get("id") or f"figure-{number}")
    figure_tag["class"] = ["figure"]

    img = soup.new_tag("img", src=src, alt=invocation.get("alt", default=caption))
    if width:
        img["width"] = width
    figure_tag.append(img)

    if caption:
        figcaption = soup.new_tag("figcaption")
        figcaption.string = f"Figure {number}: {caption}"
        figure_tag.append(figcaption)

    soup.append(figure_tag)
    return str(soup)
