import io
import logging
import os
from pathlib import Path
from typing import Annotated, Any, Callable, Iterable

import pydantic
from pydantic import Field
from ruamel.yaml import YAML, YAMLError

from image_mirror.config.shared import MirrorYAMLModel
from image_mirror.config.source import Source
from image_mirror.config.target import Target
from image_mirror.error import MirrorDecodeError, MirrorEncodeError, MirrorFileError, MirrorScanError

log = logging.getLogger(__name__)

ImageScanner = Callable[[Path], Iterable[str]]


def _loader() -> YAML:
    # The base loader keeps every scalar a string so unquoted versions such as `1.10` are not read as numbers.
    return YAML(typ="base")


def _dumper() -> YAML:
    yaml = YAML()
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


class Manifest(MirrorYAMLModel):
    """Model representation of an image manifest: the images to mirror and the default target to mirror them to."""

    target: Annotated[Target, Field(default_factory=Target, description="Default target for all sources.")]
    sources: Annotated[
        list[Source], Field(default_factory=list, description="Images to mirror, in the order they are processed.")
    ]

    @classmethod
    def new(cls, target_host: str, target_repository: str = "") -> "Manifest":
        """Create an empty manifest with the given default target.

        :param target_host: Registry host of the default target.
        :param target_repository: Repository prefix of the default target.
        """
        return cls(target=Target(host=target_host, repository=target_repository))

    @classmethod
    def new_with_autodetect(
        cls,
        target_host: str,
        target_repository: str,
        scan_root: str | os.PathLike,
        scanner: ImageScanner | None = None,
    ) -> "Manifest":
        """Create a manifest populated with the images found under a source tree.

        Detected sources are left without a target of their own so they are persisted as inheriting the manifest
        target.

        :param target_host: Registry host of the default target.
        :param target_repository: Repository prefix of the default target.
        :param scan_root: Root of the source tree to scan.
        :param scanner: Callable returning raw image references found under a path. Defaults to the Kubernetes
            manifest scanner.

        :raises MirrorScanError: If the source tree could not be scanned.
        """
        if scanner is None:
            from image_mirror.scan.kubernetes import scan_for_images

            scanner = scan_for_images

        manifest = cls.new(target_host, target_repository)

        scan_root = Path(scan_root)
        try:
            images = list(scanner(scan_root))
        except MirrorScanError:
            raise
        except Exception as e:
            raise MirrorScanError(f"Failed to scan for images: {e}", scan_root) from e

        log.info(f"Found {len(images)} image(s) in [bold]{scan_root}")
        for image in images:
            log.debug(f"Adding detected image [bold]{image}")
            manifest.sources.append(Source.from_image(image))

        return manifest

    def resolve_default_targets(self) -> None:
        """Assigns a copy of the manifest target to every source without a target of its own.

        Later changes to the manifest target do not affect sources resolved here.
        """
        for source in self.sources:
            if source.target is None or source.target.is_empty:
                source.target = self.target.model_copy(deep=True)

    @classmethod
    def loads(cls, data: str | bytes, filepath: Path | None = None) -> "Manifest":
        """Load a manifest from its persisted YAML form and resolve inherited targets.

        :param data: The manifest file contents.
        :param filepath: Optional path the contents were read from, used in error messages.

        :raises MirrorDecodeError: If the contents are not a well-formed manifest.
        """
        if isinstance(data, bytes):
            try:
                data = data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise MirrorDecodeError("Manifest is not valid UTF-8", filepath, e) from e

        try:
            document = _loader().load(data)
        except YAMLError as e:
            raise MirrorDecodeError("Manifest is not valid YAML", filepath, e) from e

        if document is None or document == "":
            document = {}
        if not isinstance(document, dict):
            raise MirrorDecodeError(f"Manifest must be a mapping, found {type(document).__name__}", filepath)
        if document.get("sources") == "":
            document["sources"] = []
        if document.get("target") == "":
            document.pop("target")

        try:
            manifest = cls(**document)
        except (pydantic.ValidationError, TypeError) as e:
            raise MirrorDecodeError("Manifest failed validation", filepath, e) from e

        manifest.resolve_default_targets()
        return manifest

    @classmethod
    def load(cls, path: str | os.PathLike) -> "Manifest":
        """Load a manifest file.

        :param path: Path to the manifest file.

        :raises MirrorFileError: If the manifest file does not exist.
        :raises MirrorDecodeError: If the manifest file is not a well-formed manifest.
        """
        path = Path(path)
        if not path.is_file():
            raise MirrorFileError("Image manifest not found. Try running `image-mirror create` first.", path)

        log.debug(f"Loading image manifest from [bold]{path}")
        return cls.loads(path.read_bytes(), filepath=path)

    def to_yaml(self) -> dict[str, Any]:
        """Returns the persisted form of the manifest."""
        data: dict[str, Any] = {"target": self.target.to_yaml()}
        if self.sources:
            data["sources"] = [source.to_yaml(self.target) for source in self.sources]
        return data

    def dumps(self) -> str:
        """Serialize the manifest to its persisted YAML form.

        All double quotes are stripped from the output.

        :raises MirrorEncodeError: If the manifest could not be serialized.
        """
        stream = io.StringIO()
        try:
            _dumper().dump(self.to_yaml(), stream)
        except YAMLError as e:
            raise MirrorEncodeError("Failed to serialize image manifest", None, e) from e

        return stream.getvalue().replace('"', "")

    def write(self, path: str | os.PathLike) -> None:
        """Write the manifest to a file.

        :param path: Path to the manifest file.

        :raises MirrorEncodeError: If the manifest could not be serialized or written.
        """
        path = Path(path)
        contents = self.dumps()
        log.debug(f"Writing image manifest to [bold]{path}")
        try:
            path.write_text(contents)
        except OSError as e:
            raise MirrorEncodeError("Failed to write image manifest", path, e) from e

    def source_images(self) -> list[str]:
        """Returns the source image reference of every source."""
        return [source.image() for source in self.sources]

    def target_images(self) -> list[str]:
        """Returns the target image reference of every source."""
        return [source.target_image(self.target) for source in self.sources]
