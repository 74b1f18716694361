r"""Path template expansion.

Templates use brace placeholders (``/users/{id}``); literal braces are
written ``{{`` and ``}}``. Every placeholder must be resolved: an
unknown or malformed placeholder is an error rather than being sent to
the server as-is.
"""

from __future__ import annotations

__all__ = ["expand_template", "template_variables"]

import string
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from recast.exceptions import TemplateExpansionError

if TYPE_CHECKING:
    from collections.abc import Mapping

_FORMATTER = string.Formatter()


def template_variables(template: str) -> list[str]:
    """Return the placeholder names of a template, in order.

    Args:
        template: The path template.

    Returns:
        The placeholder names. A name used twice appears twice.

    Raises:
        TemplateExpansionError: If the template syntax is invalid.

    Example:
        ```pycon
        >>> from recast.request.template import template_variables
        >>> template_variables("/users/{user_id}/posts/{post_id}")
        ['user_id', 'post_id']

        ```
    """
    try:
        parsed = list(_FORMATTER.parse(template))
    except ValueError as exc:
        msg = f"invalid path template {template!r}: {exc}"
        raise TemplateExpansionError(template, msg) from exc

    names = []
    for _, name, _, conversion in parsed:
        if name is None:
            continue
        if not name.isidentifier():
            msg = f"invalid placeholder {{{name}}} in path template {template!r}"
            raise TemplateExpansionError(template, msg)
        if conversion is not None:
            msg = f"conversion !{conversion} is not supported in path template {template!r}"
            raise TemplateExpansionError(template, msg)
        names.append(name)
    return names


def expand_template(template: str, params: Mapping[str, Any]) -> str:
    r"""Expand a path template with path parameters.

    Each value is converted to a string (applying the placeholder format
    spec if any) and percent-encoded as a single path segment.

    Args:
        template: The path template, e.g. ``"/users/{id}"``.
        params: The values of the placeholders.

    Returns:
        The expanded path.

    Raises:
        TemplateExpansionError: If the template syntax is invalid or a
            placeholder has no value.

    Example:
        ```pycon
        >>> from recast.request.template import expand_template
        >>> expand_template("/users/{id}", {"id": 42})
        '/users/42'
        >>> expand_template("/files/{name}", {"name": "a b/c"})
        '/files/a%20b%2Fc'

        ```
    """
    names = template_variables(template)
    missing = sorted({name for name in names if name not in params})
    if missing:
        msg = f"missing path parameter(s) {', '.join(missing)} for template {template!r}"
        raise TemplateExpansionError(template, msg)

    chunks = []
    for literal, name, format_spec, _ in _FORMATTER.parse(template):
        chunks.append(literal)
        if name is None:
            continue
        try:
            value = format(params[name], format_spec or "")
        except (TypeError, ValueError) as exc:
            msg = f"cannot format path parameter {name!r} with spec {format_spec!r}: {exc}"
            raise TemplateExpansionError(template, msg) from exc
        try:
            chunks.append(quote(value, safe=""))
        except UnicodeEncodeError as exc:
            msg = f"path parameter {name!r} is not valid UTF-8 text: {exc}"
            raise TemplateExpansionError(template, msg) from exc
    return "".join(chunks)
