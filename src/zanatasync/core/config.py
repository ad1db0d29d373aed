"""Shared configuration classes for zanatasync.

This module defines the connection settings used by the REST client
and by every CLI command.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ServerConfig:
    """Configuration for connecting to a Zanata server.

    Attributes:
        url: Base URL of the server (e.g., "https://translate.example.com").
        username: Zanata user name.
        api_key: API key of that user.
        timeout: Request timeout in seconds.
        verify_ssl: Whether to verify SSL certificates (default True).
    """

    url: str
    username: str
    api_key: str
    timeout: float = 30.0
    verify_ssl: bool = True

    def __post_init__(self) -> None:
        """Normalize server URL."""
        self.url = self.url.rstrip("/")

    @property
    def rest_url(self) -> str:
        """Get the base URL of the REST API.

        Returns:
            URL of the /rest root.
        """
        return f"{self.url}/rest"

    @property
    def auth_headers(self) -> dict[str, str]:
        """Get the authentication headers expected by the server."""
        return {
            "X-Auth-User": self.username,
            "X-Auth-Token": self.api_key,
        }
