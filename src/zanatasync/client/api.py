"""HTTP client for the Zanata REST API.

This module provides:
- ZanataClient: HTTP client for communicating with the server
- Project, version and locale metadata operations
- Source document and translation resource operations
- Document statistics
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx

from zanatasync.core.config import ServerConfig

logger = logging.getLogger(__name__)

# Extensions requested on every resource call so gettext metadata round-trips
RESOURCE_EXTENSIONS = ("gettext", "comment")

PROJECT_TYPES = {"gettext": "Gettext", "podir": "Podir", "file": "File"}


class APIError(Exception):
    """Base exception for API errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(APIError):
    """Authentication failed."""


class NotFoundError(APIError):
    """Resource not found."""


class VersionExistsError(APIError):
    """A version with the requested id already exists."""


@dataclass
class ProjectSummary:
    """Project entry from the project list."""

    id: str
    name: str
    default_type: str | None
    status: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectSummary:
        """Create from API response dictionary."""
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            default_type=data.get("defaultType"),
            status=data.get("status", "ACTIVE"),
        )

    @property
    def is_active(self) -> bool:
        return self.status == "ACTIVE"


@dataclass
class VersionSummary:
    """Version (iteration) entry of a project."""

    id: str
    status: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VersionSummary:
        """Create from API response dictionary."""
        return cls(id=data["id"], status=data.get("status", "ACTIVE"))

    @property
    def is_active(self) -> bool:
        return self.status == "ACTIVE"


@dataclass
class ProjectInfo:
    """Project details including its versions."""

    id: str
    name: str
    default_type: str | None
    status: str
    versions: list[VersionSummary] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProjectInfo:
        """Create from API response dictionary."""
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            default_type=data.get("defaultType"),
            status=data.get("status", "ACTIVE"),
            versions=[VersionSummary.from_dict(v) for v in data.get("iterations", [])],
        )

    @property
    def latest_version(self) -> VersionSummary | None:
        """Last active version, in server order."""
        active = [v for v in self.versions if v.is_active]
        return active[-1] if active else None


@dataclass
class LocaleDetails:
    """Locale enabled (or not) for a version."""

    locale_id: str
    display_name: str
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LocaleDetails:
        """Create from API response dictionary."""
        locale_id = data["localeId"]
        return cls(
            locale_id=locale_id,
            display_name=data.get("displayName", locale_id),
            enabled=data.get("enabled", True),
        )


@dataclass
class VersionInfo:
    """Version details including its locales."""

    id: str
    status: str
    project_type: str | None
    locales: list[LocaleDetails] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VersionInfo:
        """Create from API response dictionary."""
        return cls(
            id=data["id"],
            status=data.get("status", "ACTIVE"),
            project_type=data.get("projectType"),
        )

    @property
    def enabled_locales(self) -> list[LocaleDetails]:
        return [locale for locale in self.locales if locale.enabled]


@dataclass
class StatsEntry:
    """One statistics row (a locale in a given unit)."""

    locale: str
    unit: str
    total: int
    translated: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> StatsEntry:
        """Create from API response dictionary."""
        return cls(
            locale=data["locale"],
            unit=data.get("unit", "WORD"),
            total=int(data.get("total", 0)),
            translated=int(data.get("translated", 0)),
        )

    @property
    def percent(self) -> float:
        """Get translated percentage (an empty document counts as done)."""
        if self.total == 0:
            return 100.0
        return self.translated / self.total * 100


@dataclass
class DocumentStats:
    """Translation statistics of one source document."""

    document: str
    stats: list[StatsEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, document: str, data: dict[str, Any]) -> DocumentStats:
        """Create from API response dictionary."""
        return cls(
            document=document,
            stats=[StatsEntry.from_dict(s) for s in data.get("stats", [])],
        )

    @property
    def word_stats(self) -> list[StatsEntry]:
        return [s for s in self.stats if s.unit == "WORD"]

    @property
    def percent(self) -> float:
        """Overall translated percentage across locales, in words."""
        words = self.word_stats
        total = sum(s.total for s in words)
        if total == 0:
            return 100.0
        return sum(s.translated for s in words) / total * 100


def encode_document_id(name: str) -> str:
    """Encode a document name for use in a URL path.

    The server expects "/" in document names to be sent as ",".
    """
    return quote(name.replace("/", ","), safe=",")


class ZanataClient:
    """HTTP client for the Zanata REST API."""

    def __init__(self, config: ServerConfig) -> None:
        """Initialize the client.

        Args:
            config: Server connection settings.
        """
        self._config = config
        self._client = httpx.Client(
            base_url=config.rest_url,
            timeout=config.timeout,
            verify=config.verify_ssl,
            headers={"Accept": "application/json", **config.auth_headers},
        )

    @property
    def config(self) -> ServerConfig:
        return self._config

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> ZanataClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send a request, turning transport failures into APIError."""
        logger.debug(f"{method} {url}")
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            raise APIError(f"Request to {self._config.url} failed: {e}") from e
        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        """Handle API response and raise appropriate exceptions."""
        if response.status_code == 401:
            raise AuthenticationError("Invalid username or API key", 401)
        if response.status_code == 404:
            raise NotFoundError(f"Resource not found: {response.request.url.path}", 404)
        if response.status_code >= 400:
            detail = response.text.strip() or response.reason_phrase
            raise APIError(detail, response.status_code)
        return response

    @staticmethod
    def _resource_path(project_id: str, version: str, document: str | None = None) -> str:
        path = f"/projects/p/{project_id}/iterations/i/{version}/r"
        if document is not None:
            path += f"/{encode_document_id(document)}"
        return path

    # === Project operations ===

    def list_projects(self) -> list[ProjectSummary]:
        """List all projects visible to the user.

        Returns:
            List of projects.
        """
        response = self._request("GET", "/projects")
        return [ProjectSummary.from_dict(p) for p in response.json()]

    def get_project(self, project_id: str) -> ProjectInfo:
        """Get project details.

        Args:
            project_id: Project slug.

        Returns:
            Project details with its versions.

        Raises:
            NotFoundError: If the project does not exist.
        """
        response = self._request("GET", f"/projects/p/{project_id}")
        return ProjectInfo.from_dict(response.json())

    # === Version operations ===

    def get_version(self, project_id: str, version: str) -> VersionInfo:
        """Get version details (without locales).

        Raises:
            NotFoundError: If the version does not exist.
        """
        response = self._request("GET", f"/project/{project_id}/version/{version}")
        return VersionInfo.from_dict(response.json())

    def get_version_locales(self, project_id: str, version: str) -> list[LocaleDetails]:
        """Get the locales configured for a version."""
        response = self._request(
            "GET", f"/project/{project_id}/version/{version}/locales"
        )
        return [LocaleDetails.from_dict(locale) for locale in response.json()]

    def version_exists(self, project_id: str, version: str) -> bool:
        """Check if a version exists."""
        try:
            self._request("GET", f"/projects/p/{project_id}/iterations/i/{version}")
        except NotFoundError:
            return False
        return True

    def create_version(
        self, project_id: str, version: str, project_type: str = "gettext"
    ) -> VersionInfo:
        """Create a new version of a project.

        Args:
            project_id: Project slug.
            version: Id of the new version.
            project_type: File type of the version.

        Returns:
            The created version.

        Raises:
            VersionExistsError: If the version already exists.
        """
        if self.version_exists(project_id, version):
            raise VersionExistsError(f"Version '{version}' already exists", 409)

        payload = {
            "id": version,
            "status": "ACTIVE",
            "projectType": PROJECT_TYPES.get(project_type, project_type),
        }
        self._request(
            "PUT", f"/projects/p/{project_id}/iterations/i/{version}", json=payload
        )
        return VersionInfo(id=version, status="ACTIVE", project_type=payload["projectType"])

    # === Document operations ===

    def list_documents(self, project_id: str, version: str) -> list[str]:
        """List the names of the source documents of a version."""
        response = self._request("GET", self._resource_path(project_id, version))
        return [doc["name"] for doc in response.json()]

    def get_resource(self, project_id: str, version: str, document: str) -> dict[str, Any]:
        """Get a source document.

        Raises:
            NotFoundError: If the document does not exist.
        """
        response = self._request(
            "GET",
            self._resource_path(project_id, version, document),
            params={"ext": list(RESOURCE_EXTENSIONS)},
        )
        result: dict[str, Any] = response.json()
        return result

    def put_resource(
        self,
        project_id: str,
        version: str,
        document: str,
        resource: dict[str, Any],
        copy_trans: bool = True,
    ) -> None:
        """Create or replace a source document.

        Args:
            copy_trans: Let the server reuse matching translations from
                other versions for new text flows.
        """
        self._request(
            "PUT",
            self._resource_path(project_id, version, document),
            params={
                "ext": list(RESOURCE_EXTENSIONS),
                "copyTrans": str(copy_trans).lower(),
            },
            json=resource,
        )

    def get_translations(
        self, project_id: str, version: str, document: str, locale: str
    ) -> dict[str, Any] | None:
        """Get the translations of a document for one locale.

        Returns:
            The translations resource, or None if nothing was translated yet.
        """
        path = self._resource_path(project_id, version, document)
        try:
            response = self._request(
                "GET",
                f"{path}/translations/{locale}",
                params={"ext": list(RESOURCE_EXTENSIONS)},
            )
        except NotFoundError:
            return None
        result: dict[str, Any] = response.json()
        return result

    def put_translations(
        self,
        project_id: str,
        version: str,
        document: str,
        locale: str,
        translations: dict[str, Any],
        merge: str = "auto",
    ) -> None:
        """Upload the translations of a document for one locale.

        Args:
            merge: "auto" keeps server translations that are newer,
                "import" overwrites them.
        """
        path = self._resource_path(project_id, version, document)
        self._request(
            "PUT",
            f"{path}/translations/{locale}",
            params={"ext": list(RESOURCE_EXTENSIONS), "merge": merge},
            json=translations,
        )

    # === Statistics ===

    def get_document_stats(
        self, project_id: str, version: str, document: str, word: bool = True
    ) -> DocumentStats:
        """Get translation statistics for a document."""
        response = self._request(
            "GET",
            f"/stats/proj/{project_id}/iter/{version}/doc/{encode_document_id(document)}",
            params={"word": str(word).lower()},
        )
        return DocumentStats.from_dict(document, response.json())
