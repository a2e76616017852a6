import functools
import re
from typing import Iterable

import semver

from image_mirror.const import MAX_NEWER_VERSIONS
from image_mirror.error import MirrorVersionParseError

# An optional `v`, any number of numeric segments, then an optional pre-release and build metadata. The pre-release
# hyphen may be left out when it starts with a letter, as in `1.2.3beta`.
VERSION_PATTERN = re.compile(
    r"^v?(?P<segments>[0-9]+(?:\.[0-9]+)*?)"
    r"(?:-(?P<numeric_prerelease>[0-9]+[0-9A-Za-z\-~]*(?:\.[0-9A-Za-z\-~]+)*)"
    r"|-?(?P<prerelease>[A-Za-z\-~]+[0-9A-Za-z\-~]*(?:\.[0-9A-Za-z\-~]+)*))?"
    r"(?:\+(?P<build>[0-9A-Za-z\-~]+(?:\.[0-9A-Za-z\-~]+)*))?$"
)


@functools.total_ordering
class ImageVersion:
    """A semantic version parsed from an image tag that remembers the tag it was parsed from.

    Image tags are looser than strict semantic versions. A leading `v` is allowed, missing minor and patch segments
    count as zero, and segments past the patch are compared in order after it, so `1.2.3.4` is newer than `1.2.3`
    and `1.2.3.0` equals it. Build metadata is ignored when comparing.

    Tags must be reported back exactly as the registry lists them, so the parsed form is only used for ordering.
    """

    def __init__(self, version: str):
        """Initialize the ImageVersion with an image tag.

        :raises ValueError: If the tag is not a version.
        """
        match = VERSION_PATTERN.match(version)
        if match is None:
            raise ValueError(f"Malformed version: '{version}'")

        segments = [int(s) for s in match.group("segments").split(".")]
        segments.extend([0] * (3 - len(segments)))

        self.original = version
        self.semver = semver.Version(
            *segments[:3],
            prerelease=match.group("numeric_prerelease") or match.group("prerelease"),
            build=match.group("build"),
        )
        self.extra_segments = tuple(segments[3:])

    @property
    def segments(self) -> tuple[int, ...]:
        return self.semver.to_tuple()[:3] + self.extra_segments

    def _compare(self, other: "ImageVersion") -> int:
        length = max(len(self.segments), len(other.segments))
        left = self.segments + (0,) * (length - len(self.segments))
        right = other.segments + (0,) * (length - len(other.segments))
        if left != right:
            return -1 if left < right else 1
        # Release segments are equal, so semver only decides on the pre-release.
        return self.semver.compare(other.semver)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ImageVersion):
            return NotImplemented
        return self._compare(other) == 0

    def __lt__(self, other: "ImageVersion") -> bool:
        if not isinstance(other, ImageVersion):
            return NotImplemented
        return self._compare(other) < 0

    def __hash__(self) -> int:
        segments = list(self.segments)
        while len(segments) > 1 and segments[-1] == 0:
            segments.pop()
        return hash((tuple(segments), self.semver.prerelease))

    def __str__(self) -> str:
        s = ".".join(str(segment) for segment in self.segments)
        if self.semver.prerelease:
            s += f"-{self.semver.prerelease}"
        if self.semver.build:
            s += f"+{self.semver.build}"
        return s

    def __repr__(self) -> str:
        return f"<ImageVersion('{self.original}')>"


def parse_version(tag: str, image: str | None = None) -> ImageVersion:
    """Parse an image tag as a version.

    :param tag: The image tag.
    :param image: Optional image reference the tag belongs to, used in error messages.

    :raises MirrorVersionParseError: If the tag is not a valid version.
    """
    try:
        return ImageVersion(tag)
    except ValueError as e:
        raise MirrorVersionParseError(tag, image) from e


def is_release_tag(tag: str) -> bool:
    """Returns True if a tag looks like a release.

    Release tags have more than one `.` and no `-`. This drops floating tags such as `latest` or `1.2` and
    pre-release or build tags such as `1.2.3-rc1`.
    """
    return tag.count(".") > 1 and "-" not in tag


def filter_tags(tags: Iterable[str]) -> list[str]:
    """Filter a list of tags to release tags, keeping their order.

    :param tags: Tags as reported by the registry.
    """
    return [tag for tag in tags if is_release_tag(tag)]


def newer_versions(current: ImageVersion, tags: Iterable[str], limit: int = MAX_NEWER_VERSIONS) -> list[str]:
    """Find the tags that are strictly newer than the current version.

    Tags that are not valid versions are ignored. Only the last `limit` newer tags in the order given are kept; they
    are not sorted first, so these are not necessarily the highest versions.

    :param current: The version currently in use.
    :param tags: Candidate tags, usually the output of `filter_tags`.
    :param limit: Maximum number of newer tags to return.

    :return: The newer tags as originally written.
    """
    newer = []
    for tag in tags:
        try:
            version = ImageVersion(tag)
        except ValueError:
            continue

        if current < version:
            newer.append(version.original)

    if len(newer) > limit:
        newer = newer[len(newer) - limit :]

    return newer
