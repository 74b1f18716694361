r"""Immutable description of the request to send."""

from __future__ import annotations

__all__ = ["RequestSpec"]

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from recast.core.validation import validate_method
from recast.request.headers import normalize_headers

if TYPE_CHECKING:
    from recast.request.auth import BasicAuth
    from recast.request.body import RequestBody


@dataclass(frozen=True)
class RequestSpec:
    """Description of a request, independent of any attempt.

    Args:
        method: The HTTP method. Stored upper-cased.
        base_url: The URL prefix, e.g. ``"https://api.example.com"``.
        path_template: The path template appended to ``base_url``, e.g.
            ``"/users/{id}"``.
        path_params: The values of the path template placeholders.
        query_params: A mapping or dataclass instance encoded into the
            query string, or ``None``.
        headers: The configured headers as ``(name, value)`` pairs.
        body: The request body, or ``None``.
        auth: Optional basic authentication credentials.

    Example:
        ```pycon
        >>> from recast.request.spec import RequestSpec
        >>> spec = RequestSpec(method="get", base_url="https://api.example.com")
        >>> spec.method
        'GET'
        >>> spec.merge(path_template="/users").path_template
        '/users'

        ```
    """

    method: str = "GET"
    base_url: str = ""
    path_template: str = ""
    path_params: Mapping[str, Any] = field(default_factory=dict)
    query_params: Any = None
    headers: tuple[tuple[str, str], ...] = ()
    body: RequestBody | None = None
    auth: BasicAuth | None = None

    def __post_init__(self) -> None:
        validate_method(self.method)
        object.__setattr__(self, "method", self.method.upper())
        object.__setattr__(self, "path_params", MappingProxyType(dict(self.path_params)))
        if isinstance(self.query_params, Mapping):
            object.__setattr__(
                self, "query_params", MappingProxyType(dict(self.query_params))
            )
        object.__setattr__(self, "headers", normalize_headers(self.headers))

    @property
    def url_template(self) -> str:
        """The full URL template (base URL followed by the path template)."""
        return self.base_url + self.path_template

    def merge(self, **overrides: Any) -> RequestSpec:
        """Create a new spec with the given fields replaced.

        Args:
            **overrides: Keyword arguments for fields to replace.

        Returns:
            A new ``RequestSpec``.
        """
        return replace(self, **overrides)
