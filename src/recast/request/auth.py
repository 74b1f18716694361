r"""Static basic authentication credentials."""

from __future__ import annotations

__all__ = ["BasicAuth"]

import base64
from dataclasses import dataclass, field


@dataclass(frozen=True)
class BasicAuth:
    r"""Basic authentication credentials.

    The credentials are read-only, so one instance can be shared by
    requests running at the same time.

    Args:
        username: The user name.
        password: The password.

    Example:
        ```pycon
        >>> from recast.request.auth import BasicAuth
        >>> BasicAuth("ada", "secret").header_value()
        'Basic YWRhOnNlY3JldA=='

        ```
    """

    username: str
    password: str = field(repr=False)

    def header_value(self) -> str:
        """Return the value of the ``Authorization`` header."""
        token = base64.b64encode(f"{self.username}:{self.password}".encode())
        return f"Basic {token.decode('ascii')}"
