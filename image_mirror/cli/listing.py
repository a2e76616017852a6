import logging
from pathlib import Path
from typing import Annotated, Optional

import typer

from image_mirror import error
from image_mirror.cli.common import ManifestOption, with_verbosity_flags
from image_mirror.config import Manifest
from image_mirror.const import ImageLocationEnum
from image_mirror.log import stderr_console, stdout_console
from image_mirror.settings import MirrorSettings

log = logging.getLogger(__name__)


def write_images(images: list[str], settings: MirrorSettings) -> None:
    """Writes images one per line to the configured output file, or to stdout if none is set."""
    if settings.output is None:
        for image in images:
            stdout_console.print(image, markup=False, highlight=False, soft_wrap=True)
        return

    log.debug(f"Writing {len(images)} image(s) to [bold]{settings.output}")
    with open(settings.output, "w") as f:
        for image in images:
            f.write(f"{image}\n")


@with_verbosity_flags
def list_images(
    location: Annotated[
        ImageLocationEnum,
        typer.Argument(help="Whether to list the source images or the images they are mirrored to."),
    ] = ImageLocationEnum.SOURCE,
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", show_default=False, help="Write the images to a file instead of stdout."),
    ] = None,
    manifest: ManifestOption = None,
) -> None:
    """Lists the images found in the image manifest"""
    settings = MirrorSettings(manifest_path=manifest, output=output)

    try:
        image_manifest = Manifest.load(settings.manifest_path)
    except error.MirrorError as e:
        log.error(str(e))
        stderr_console.print(f"❌ Failed to load manifest '{settings.manifest_path}'", style="error")
        raise typer.Exit(code=1)

    if location == ImageLocationEnum.TARGET:
        images = image_manifest.target_images()
    else:
        images = image_manifest.source_images()

    try:
        write_images(images, settings)
    except OSError as e:
        log.error(f"Unable to write images to {settings.output}: {e}")
        raise typer.Exit(code=1)
