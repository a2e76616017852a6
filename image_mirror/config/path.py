from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class RegistryPath(BaseModel):
    """A parsed `host/repository` registry path.

    The host is everything before the first `/`. A path without a `/` has no host and is taken to be a repository in
    its entirety, so `docker.io` parses as a repository named `docker.io`. The rule is a heuristic rather than a
    registry host grammar: it cannot tell a one-segment repository from a bare host.

    Tags and digests are not part of a registry path; they belong to the Source that owns the path.
    """

    model_config = ConfigDict(frozen=True)

    raw: Annotated[str, Field(description="The unparsed path text.", examples=["docker.io/library/ubuntu"])]
    host: Annotated[str, Field(default="", description="Registry host, empty when the path has no `/`.")]
    repository: Annotated[str, Field(default="", description="Repository under the host.")]

    @classmethod
    def parse(cls, path: str) -> "RegistryPath":
        """Parse a registry path into its host and repository.

        :param path: The path text. Every string is accepted.
        :return: The parsed RegistryPath.
        """
        if "/" not in path:
            return cls(raw=path, host="", repository=path)

        host = path.split("/", 1)[0]
        if host == "":
            return cls(raw=path, host="", repository=path)

        return cls(raw=path, host=host, repository=path.removeprefix(f"{host}/"))

    @classmethod
    def from_parts(cls, host: str, repository: str) -> "RegistryPath":
        """Build the path a host and repository pair reads back as once written.

        A host-less repository with a `/` is split like any other path, so `library/nginx` has the host `library`.

        :param host: Registry host, may be empty.
        :param repository: Repository, may be empty.
        """
        return cls.parse(cls.render(host, repository))

    @staticmethod
    def render(host: str, repository: str) -> str:
        """Render a host and repository back into path text.

        A host without a repository is rendered with a trailing `/` so it parses back as a host.

        :param host: Registry host, may be empty.
        :param repository: Repository, may be empty.
        :return: The rendered path.
        """
        if not host:
            return repository
        return f"{host}/{repository}"

    def __str__(self) -> str:
        return self.raw
