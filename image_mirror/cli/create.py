import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from image_mirror import error
from image_mirror.cli.common import ManifestOption, with_verbosity_flags
from image_mirror.config import Manifest, RegistryPath
from image_mirror.log import stderr_console
from image_mirror.settings import MirrorSettings

log = logging.getLogger(__name__)


@with_verbosity_flags
def create(
    target: Annotated[
        str,
        typer.Option(
            "--target",
            "-t",
            show_default=False,
            help="The target registry and repository to mirror images to *(ex. organization.com/repo)*.",
        ),
    ],
    source: Annotated[
        Optional[Path],
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=True,
            readable=True,
            resolve_path=True,
            show_default=False,
            help="Source tree to scan for Kubernetes manifests. Images found are added to the new manifest.",
        ),
    ] = None,
    manifest: ManifestOption = None,
) -> None:
    """Creates a new image manifest

    When a source path is given, every container image referenced by the Kubernetes manifests found under it is
    added to the new manifest.
    """
    settings = MirrorSettings(manifest_path=manifest)
    if settings.manifest_path.exists():
        stderr_console.print(f"❌ Manifest file '{settings.manifest_path}' already exists", style="error")
        raise typer.Exit(code=1)

    target_path = RegistryPath.parse(target)
    try:
        if source is None:
            image_manifest = Manifest.new(target_path.host, target_path.repository)
        else:
            image_manifest = Manifest.new_with_autodetect(target_path.host, target_path.repository, source)
        image_manifest.write(settings.manifest_path)
    except error.MirrorError as e:
        log.error(str(e))
        stderr_console.print(f"❌ Failed to create manifest '{settings.manifest_path}'", style="error")
        raise typer.Exit(code=1)

    stderr_console.print(
        f"✅ Created manifest '{settings.manifest_path}' with {len(image_manifest.sources)} image(s)", style="success"
    )
