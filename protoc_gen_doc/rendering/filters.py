"""Template filters for paragraph markup and line-break removal.

The filters are meant to be applied as block filters, e.g.::

    {% filter p %}{{ message.message_description }}{% endfilter %}

so the enclosed content is rendered by the engine before it is transformed.
They also work inline (``{{ text | p }}``), escaping the input first when
autoescaping is active.
"""

from __future__ import annotations

import re
from typing import Callable, Dict

from jinja2 import pass_eval_context
from jinja2.nodes import EvalContext
from markupsafe import Markup, escape

_PARAGRAPH_BREAK = re.compile(r"(?:\r\n|\n|\r)\s*(?:\r\n|\n|\r)")


def wrap_paragraphs(text: str, open_tag: str, close_tag: str) -> str:
    """Split ``text`` on blank lines and enclose each paragraph in the given tags."""
    paragraphs = _PARAGRAPH_BREAK.split(text)
    return open_tag + f"{close_tag}{open_tag}".join(paragraphs) + close_tag


def remove_line_breaks(text: str) -> str:
    return text.replace("\r\n", "").replace("\r", "").replace("\n", "")


def _markup_filter(transform: Callable[[str], str]) -> Callable[[EvalContext, object], str]:
    @pass_eval_context
    def apply(eval_ctx: EvalContext, value: object) -> str:
        if eval_ctx.autoescape:
            return Markup(transform(str(escape(value))))
        return transform(str(value))

    apply.__name__ = transform.__name__
    return apply


def _p(text: str) -> str:
    return wrap_paragraphs(text, "<p>", "</p>")


def _para(text: str) -> str:
    return wrap_paragraphs(text, "<para>", "</para>")


FILTERS: Dict[str, Callable[..., str]] = {
    "p": _markup_filter(_p),
    "para": _markup_filter(_para),
    "nobr": _markup_filter(remove_line_breaks),
}


__all__ = ["FILTERS", "remove_line_breaks", "wrap_paragraphs"]
