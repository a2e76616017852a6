from enum import Enum

APP_NAME = "image-mirror"

DEFAULT_MANIFEST_FILENAME = ".images.yaml"
MANIFEST_FILENAMES = [DEFAULT_MANIFEST_FILENAME, ".images.yml"]

# Tag used on the target side when a source is neither tag- nor digest-pinned.
DEFAULT_TARGET_TAG = "latest"

# Maximum number of newer versions reported per image by the update check.
MAX_NEWER_VERSIONS = 5

DEFAULT_REGISTRY_HOST = "docker.io"
DEFAULT_REGISTRY_API_HOST = "registry-1.docker.io"
DEFAULT_REGISTRY_NAMESPACE = "library"
DEFAULT_REGISTRY_TIMEOUT = 30.0

KUBERNETES_CONTAINER_KEYS = ["containers", "initContainers", "ephemeralContainers"]


class ImageLocationEnum(str, Enum):
    """Enum for which side of the mirror an image listing refers to."""

    SOURCE = "source"
    TARGET = "target"
