import logging
from typing import Annotated, List, Optional

import typer

from image_mirror import error
from image_mirror.check import UpdateStatus, check_sources
from image_mirror.cli.common import ManifestOption, with_verbosity_flags
from image_mirror.config import Auth, Manifest, Source
from image_mirror.const import DEFAULT_REGISTRY_TIMEOUT
from image_mirror.log import stderr_console
from image_mirror.registry import RegistryClient
from image_mirror.settings import MirrorSettings

log = logging.getLogger(__name__)


def source_credentials(sources: list[Source]) -> dict[str, Auth]:
    """Collects the source registry credentials of each host, first set wins."""
    credentials = {}
    for source in sources:
        if not source.auth.is_empty:
            credentials.setdefault(source.host, source.auth)
    return credentials


@with_verbosity_flags
def check(
    images: Annotated[
        Optional[List[str]],
        typer.Option(
            "--images",
            "-i",
            show_default=False,
            help="The fully qualified images to check for newer versions *(ex. myhost.com/myrepo:v1.0.0)*. "
            "Accepts multiple images. Defaults to the images in the manifest.",
        ),
    ] = None,
    timeout: Annotated[
        float, typer.Option(min=0.001, help="Timeout in seconds for each registry request.")
    ] = DEFAULT_REGISTRY_TIMEOUT,
    manifest: ManifestOption = None,
) -> None:
    """Checks for newer images in the source registries

    \b
    Only images pinned to a tag that is a version are checked. Up to five newer release tags are reported per image.
    """
    settings = MirrorSettings(manifest_path=manifest, timeout=timeout)

    try:
        if images:
            sources = [Source.from_image(image) for image in images]
        else:
            sources = Manifest.load(settings.manifest_path).sources

        client = RegistryClient(credentials=source_credentials(sources), timeout=settings.timeout)
        results = check_sources(sources, client.list_tags)
    except error.MirrorError as e:
        log.error(str(e))
        stderr_console.print("❌ Failed to check images for newer versions", style="error")
        raise typer.Exit(code=1)

    outdated = [r for r in results if r.status == UpdateStatus.NEWER_AVAILABLE]
    untagged = [r for r in results if r.status == UpdateStatus.SKIPPED_NO_TAG]
    unparsable = [r for r in results if r.status == UpdateStatus.SKIPPED_UNPARSABLE]
    if outdated:
        stderr_console.print(f"Newer versions found for {len(outdated)} image(s)", style="info")
    else:
        stderr_console.print("✅ All checked images are up to date", style="success")
    if untagged:
        stderr_console.print(f"Skipped {len(untagged)} image(s) not pinned to a tag", style="quiet")
    if unparsable:
        stderr_console.print(f"Skipped {len(unparsable)} image(s) whose tag is not a version", style="warning")
