from typing import Annotated, Any

from pydantic import Field, model_validator

from image_mirror.config.auth import Auth
from image_mirror.config.path import RegistryPath
from image_mirror.config.shared import MirrorYAMLModel


def canonical_location(data: dict[str, Any]) -> dict[str, Any]:
    """Rewrites the host and repository of model input to the pair its persisted `path` reads back as."""
    host = data.get("host", "")
    repository = data.get("repository", "")
    if isinstance(host, str) and isinstance(repository, str):
        path = RegistryPath.from_parts(host, repository)
        data["host"] = path.host
        data["repository"] = path.repository
    return data


class Target(MirrorYAMLModel):
    """Model representing the registry location images are mirrored to.

    In a manifest file a target is written as a single `path` key holding `host/repository`.
    """

    host: Annotated[str, Field(default="", description="Registry host to push images to.", examples=["ghcr.io"])]
    repository: Annotated[
        str, Field(default="", description="Repository prefix under the host. May be empty.", examples=["myorg"])
    ]
    auth: Annotated[Auth, Field(default_factory=Auth, description="Credentials for the target registry.")]

    @model_validator(mode="before")
    @classmethod
    def split_path(cls, data: Any) -> Any:
        """Splits a persisted `path` key into host and repository."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        if "path" in data:
            path = RegistryPath.parse(str(data.pop("path") or ""))
            data.setdefault("host", path.host)
            data.setdefault("repository", path.repository)
        return canonical_location(data)

    @classmethod
    def from_path(cls, path: str, auth: Auth | None = None) -> "Target":
        """Create a target from `host/repository` path text.

        :param path: The target path.
        :param auth: Optional credentials for the target registry.
        """
        registry_path = RegistryPath.parse(path)
        return cls(host=registry_path.host, repository=registry_path.repository, auth=auth or Auth())

    @property
    def path(self) -> str:
        """Returns the rendered `host/repository` path of the target."""
        return RegistryPath.render(self.host, self.repository)

    @property
    def is_empty(self) -> bool:
        """Returns True if the target has no location set."""
        return not self.host and not self.repository

    def to_yaml(self) -> dict[str, Any]:
        """Returns the persisted form of the target."""
        data: dict[str, Any] = {"path": self.path}
        if not self.auth.is_empty:
            data["auth"] = self.auth.to_yaml()
        return data
