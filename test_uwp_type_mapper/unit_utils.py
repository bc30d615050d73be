"""Utilities that ease unit-testing."""

from __future__ import annotations

import pathlib
from typing import Any, Optional, cast
from unittest.mock import Mock, patch

from pytest import FixtureRequest, LogCaptureFixture, MonkeyPatch  # noqa: PT013

from uwp_type_mapper.parse.html import HtmlElement, parse_html

__all__ = (
    "FixtureRequest",
    "LogCaptureFixture",
    "Mock",
    "MonkeyPatch",
    "example_doc_path",
    "fragment",
    "function_mock",
    "help_page",
)


def example_doc_path(file_name: str) -> str:
    """Resolve the absolute-path to `file_name` in the example-docs directory."""
    example_docs_dir = pathlib.Path(__file__).parent.parent / "example-docs"
    file_path = example_docs_dir / file_name
    return str(file_path.resolve())


def fragment(html: str) -> HtmlElement:
    """The first element of the `<body>` produced by parsing `html`.

    `html` is a fragment like `<p>Type: <strong>Number</strong></p>`.
    """
    root = parse_html(f"<html><body>{html}</body></html>")
    return cast(HtmlElement, root.find("body")[0])


def help_page(
    help_id: str,
    title: str,
    main: str = "",
    category: Optional[str] = "DevLang:javascript",
    page_title: Optional[str] = None,
) -> str:
    """HTML text of a reference page with help id `help_id`, titled `title`.

    `main` is the inner HTML of the `<div id="mainSection">` region. `category` is left out of
    the head when None. `page_title`, when given, is the `<title>` text and differs from `title`.
    """
    category_meta = (
        f'<meta name="Microsoft.Help.Category" content="{category}"/>' if category else ""
    )
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        f'<meta name="Microsoft.Help.Id" content="{help_id}"/>\n'
        f"{category_meta}\n"
        f"<title>{page_title or title}</title>\n"
        "</head>\n"
        "<body>\n"
        f'<div class="title">{title}</div>\n'
        f'<div id="mainSection">\n{main}\n</div>\n'
        "</body>\n"
        "</html>\n"
    )


def function_mock(
    request: FixtureRequest, q_function_name: str, autospec: bool = True, **kwargs: Any
) -> Mock:
    """Return mock patching function with qualified name `q_function_name`.

    Patch is reversed after calling test returns.
    """
    _patch = patch(q_function_name, autospec=autospec, **kwargs)
    request.addfinalizer(_patch.stop)
    return _patch.start()
