"""Check mirrored images for newer upstream versions.

Sources are checked one at a time in manifest order. A source whose tag is not a version is skipped and reported,
while a failure to list tags from a registry aborts the whole run.
"""

import logging
from enum import Enum
from typing import Annotated, Callable, Iterable

from pydantic import BaseModel, Field

from image_mirror.config.source import Source
from image_mirror.error import MirrorRegistryListError, MirrorVersionParseError
from image_mirror.version import filter_tags, newer_versions, parse_version

log = logging.getLogger(__name__)

TagLister = Callable[[str, str], list[str]]


class UpdateStatus(str, Enum):
    """Enum for the outcome of checking a single image."""

    UP_TO_DATE = "up-to-date"
    NEWER_AVAILABLE = "newer-available"
    SKIPPED_NO_TAG = "skipped-no-tag"
    SKIPPED_UNPARSABLE = "skipped-unparsable"


class UpdateCheckResult(BaseModel):
    """Outcome of checking a single image for newer versions."""

    image: Annotated[str, Field(description="The source image reference that was checked.")]
    status: Annotated[UpdateStatus, Field(description="Outcome of the check.")]
    newer: Annotated[
        list[str], Field(default_factory=list, description="Newer tags found, as the registry reported them.")
    ]

    @property
    def skipped(self) -> bool:
        return self.status in [UpdateStatus.SKIPPED_NO_TAG, UpdateStatus.SKIPPED_UNPARSABLE]


def check_source(source: Source, list_tags: TagLister) -> UpdateCheckResult:
    """Check a single source for newer versions.

    :param source: The source to check.
    :param list_tags: Callable listing the tags of a registry host and repository.

    :raises MirrorRegistryListError: If the tags of the source repository could not be listed.
    """
    image = source.image()
    if not source.tag:
        return UpdateCheckResult(image=image, status=UpdateStatus.SKIPPED_NO_TAG)

    try:
        current = parse_version(source.tag, image)
    except MirrorVersionParseError:
        return UpdateCheckResult(image=image, status=UpdateStatus.SKIPPED_UNPARSABLE)

    try:
        tags = list_tags(source.host, source.repository)
    except MirrorRegistryListError:
        raise
    except Exception as e:
        raise MirrorRegistryListError(f"Failed to list tags for {image}: {e}", source.host, source.repository) from e

    newer = newer_versions(current, filter_tags(tags))
    if not newer:
        return UpdateCheckResult(image=image, status=UpdateStatus.UP_TO_DATE)

    return UpdateCheckResult(image=image, status=UpdateStatus.NEWER_AVAILABLE, newer=newer)


def report(result: UpdateCheckResult) -> None:
    """Log the outcome of checking a single image."""
    if result.status == UpdateStatus.SKIPPED_NO_TAG:
        log.debug(f"Image {result.image} is not pinned to a tag. Skipping...")
    elif result.status == UpdateStatus.SKIPPED_UNPARSABLE:
        log.warning(f"Image {result.image} version did not parse correctly. Skipping...")
    elif result.status == UpdateStatus.UP_TO_DATE:
        log.info(f"Image {result.image} is up to date!")
    else:
        log.info(f"New versions for {result.image} found: {', '.join(result.newer)}")


def check_sources(sources: Iterable[Source], list_tags: TagLister) -> list[UpdateCheckResult]:
    """Check each source for newer versions, in order.

    :param sources: The sources to check.
    :param list_tags: Callable listing the tags of a registry host and repository.

    :return: One result per source.

    :raises MirrorRegistryListError: If the tags of any source repository could not be listed. Remaining sources
        are not checked.
    """
    results = []
    for source in sources:
        result = check_source(source, list_tags)
        report(result)
        results.append(result)

    return results
