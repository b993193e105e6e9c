"""Shared HTML parsing utilities."""

import copy
import functools
import logging
import re
from typing import Union

from bs4 import BeautifulSoup

HtmlSource = Union[str, bytes, BeautifulSoup, None]

_WHITESPACE_RE = re.compile(r"\s+")


def make_soup(html: HtmlSource) -> BeautifulSoup:
    """Return a parse tree for raw HTML, reusing an existing tree as-is.

    Args:
        html: Raw HTML (str or bytes), an already parsed BeautifulSoup, or None

    Returns:
        BeautifulSoup parse tree (empty document for None)
    """
    if isinstance(html, BeautifulSoup):
        return html
    if html is None:
        html = ""
    if not isinstance(html, (str, bytes)):
        raise TypeError(f"Expected HTML string or BeautifulSoup, got {type(html).__name__}")
    return BeautifulSoup(html, "html.parser")


def raw_html(html: HtmlSource) -> str:
    """Return the HTML markup as a string."""
    if isinstance(html, BeautifulSoup):
        return str(html)
    if isinstance(html, bytes):
        return html.decode("utf-8", errors="replace")
    return html or ""


def normalize_whitespace(text: str) -> str:
    """Collapse internal whitespace runs to single spaces and trim."""
    return _WHITESPACE_RE.sub(" ", text or "").strip()


def attr_text(tag, name: str) -> str:
    """Return an attribute value as a single string.

    BeautifulSoup returns multi-valued attributes (rel, class) as lists.
    """
    value = tag.get(name)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(value)
    return str(value)


def extractor(default):
    """Decorate a fact extractor so that bad input yields ``default``.

    The wrapped function logs a warning instead of raising. Mutable defaults
    are deep-copied on every call.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logging.getLogger(func.__module__).warning(
                    f"{func.__name__} failed, using default: {e}"
                )
                return copy.deepcopy(default)
        return wrapper
    return decorator
