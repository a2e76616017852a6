import logging
from typing import Annotated, Any, Self

from pydantic import Field, field_validator, model_validator

from image_mirror.config.auth import Auth
from image_mirror.config.path import RegistryPath
from image_mirror.config.shared import MirrorYAMLModel
from image_mirror.config.target import Target, canonical_location
from image_mirror.const import DEFAULT_TARGET_TAG

log = logging.getLogger(__name__)


class Source(MirrorYAMLModel):
    """Model representing one image to mirror.

    A source is pinned by either a tag or a digest, never both. A source with neither is unversioned and mirrors to
    the `latest` tag on the target side.

    In a manifest file a source is written with a `path` key holding `host/repository` and a `version` key holding
    the tag.
    """

    host: Annotated[str, Field(default="", description="Registry host of the source image.", examples=["quay.io"])]
    repository: Annotated[
        str, Field(default="", description="Repository of the source image.", examples=["prometheus/prometheus"])
    ]
    tag: Annotated[str | None, Field(default=None, description="Tag the source image is pinned to.")]
    digest: Annotated[
        str | None,
        Field(default=None, description="Digest the source image is pinned to.", examples=["sha256:0123abcd"]),
    ]
    target: Annotated[
        Target | None,
        Field(default=None, description="Target override for this image. Unset means the manifest target is used."),
    ]
    auth: Annotated[Auth, Field(default_factory=Auth, description="Credentials for the source registry.")]

    @model_validator(mode="before")
    @classmethod
    def split_persisted_keys(cls, data: Any) -> Any:
        """Maps the persisted `path` and `version` keys onto the model fields."""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        if "path" in data:
            path = RegistryPath.parse(str(data.pop("path") or ""))
            data.setdefault("host", path.host)
            data.setdefault("repository", path.repository)
        data = canonical_location(data)
        if "version" in data:
            data.setdefault("tag", data.pop("version"))
        # Keys present without a value in the manifest file load as empty strings.
        for key in ["target", "auth"]:
            if key in data and data[key] == "":
                data.pop(key)
        return data

    @field_validator("tag", "digest", mode="before")
    @classmethod
    def empty_as_unset(cls, value: Any) -> Any:
        """Treats an empty tag or digest as unset."""
        if value == "":
            return None
        return value

    @model_validator(mode="after")
    def validate_tag_digest_exclusive(self) -> Self:
        """Ensures a source is not pinned by both a tag and a digest."""
        if self.tag is not None and self.digest is not None:
            raise ValueError(
                f"Source '{self.path}' cannot specify both a tag ('{self.tag}') and a digest ('{self.digest}')."
            )
        return self

    @classmethod
    def from_image(cls, image: str, target: Target | None = None) -> "Source":
        """Create a source from a raw image reference.

        Accepts `host/repository:tag`, `host/repository@algorithm:hash`, and unversioned references. A `:` is only
        treated as a tag separator when it follows the last `/`, so a registry port is never mistaken for a tag.

        :param image: The raw image reference.
        :param target: Optional target override for the source.
        :return: The parsed Source.
        """
        reference = image.strip()
        tag = None
        digest = None

        if "@" in reference:
            reference, digest = reference.split("@", 1)
            if reference.rfind(":") > reference.rfind("/"):
                log.debug(f"Ignoring tag on digest pinned image {image}")
                reference = reference[: reference.rfind(":")]
        elif reference.rfind(":") > reference.rfind("/"):
            reference, tag = reference.rsplit(":", 1)

        path = RegistryPath.parse(reference)
        return cls(host=path.host, repository=path.repository, tag=tag, digest=digest, target=target)

    @property
    def path(self) -> str:
        """Returns the rendered `host/repository` path of the source."""
        return RegistryPath.render(self.host, self.repository)

    def image(self) -> str:
        """Returns the source image reference.

        A digest takes precedence over a tag and is rendered as `@digest`, a tag as `:tag`.
        """
        image = "/".join([p for p in [self.host, self.repository] if p])
        if self.digest:
            return f"{image}@{self.digest}"
        if self.tag:
            return f"{image}:{self.tag}"
        return image

    def target_image(self, default_target: Target | None = None) -> str:
        """Returns the image reference this source is mirrored to.

        The source repository is always placed under the target host and repository prefix. The target side is
        always tag addressed: a digest pinned source uses the hash portion of its digest as the tag, and an
        unversioned source uses `latest`.

        A digest without an `algorithm:` label renders with an empty tag.

        :param default_target: Target to use when this source has no target of its own.
        """
        target = self.target
        if target is None:
            target = default_target if default_target is not None else Target()

        if self.tag:
            image = f":{self.tag}"
        elif self.digest:
            image = f":{self.digest.partition(':')[2]}"
        else:
            image = f":{DEFAULT_TARGET_TAG}"

        if self.repository:
            image = f"/{self.repository}{image}"
        if target.repository:
            image = f"/{target.repository}{image}"
        if target.host:
            image = f"/{target.host}{image}"

        return image.lstrip("/")

    def to_yaml(self, default_target: Target | None = None) -> dict[str, Any]:
        """Returns the persisted form of the source.

        The target is only written when it is an explicit override, that is, set and different from the default.

        :param default_target: The manifest level target.
        """
        data: dict[str, Any] = {"path": self.path}
        if self.tag:
            data["version"] = self.tag
        if self.digest:
            data["digest"] = self.digest
        if self.target is not None and not self.target.is_empty and self.target != default_target:
            data["target"] = self.target.to_yaml()
        if not self.auth.is_empty:
            data["auth"] = self.auth.to_yaml()
        return data

    def __str__(self) -> str:
        return self.image()
