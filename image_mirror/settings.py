from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, Field, field_validator

from image_mirror.const import DEFAULT_REGISTRY_TIMEOUT
from image_mirror.util import auto_path, resolve_manifest_path


class MirrorSettings(BaseModel):
    """Settings for a single image-mirror invocation.

    Commands build one instance from their options and pass it to every operation that needs it.
    """

    manifest_path: Annotated[
        Path,
        Field(
            default_factory=auto_path,
            validate_default=True,
            description="Path to the image manifest file or the directory containing it.",
        ),
    ]
    output: Annotated[
        Path | None, Field(default=None, description="File to write command output to instead of stdout.")
    ]
    timeout: Annotated[
        float, Field(default=DEFAULT_REGISTRY_TIMEOUT, gt=0, description="Timeout in seconds for registry requests.")
    ]

    @field_validator("manifest_path", mode="before")
    @classmethod
    def default_manifest(cls, manifest_path: Any) -> Any:
        """Uses the working directory when no manifest path is given."""
        if manifest_path is None:
            return auto_path()
        return manifest_path

    @field_validator("manifest_path", mode="after")
    @classmethod
    def resolve_manifest(cls, manifest_path: Path) -> Path:
        """Resolves a directory to the manifest file it contains."""
        return resolve_manifest_path(manifest_path)
