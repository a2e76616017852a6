"""Autodetect the container images referenced by Kubernetes manifests in a source tree."""

import logging
import os
from pathlib import Path
from typing import Any, Iterator

from ruamel.yaml import YAML, YAMLError

from image_mirror.const import KUBERNETES_CONTAINER_KEYS
from image_mirror.error import MirrorScanError

log = logging.getLogger(__name__)

YAML_SUFFIXES = [".yaml", ".yml"]


def find_manifest_files(root: Path) -> list[Path]:
    """Returns every YAML file under a directory, sorted. A file root is returned as is."""
    if root.is_file():
        return [root]
    return sorted(p for p in root.rglob("*") if p.is_file() and p.suffix in YAML_SUFFIXES)


def find_container_images(document: Any) -> Iterator[str]:
    """Yield the image of every container spec found anywhere in a YAML document.

    Container lists are recognized by key, so images are found in Pods, in the pod templates of workloads, in
    CronJob job templates and in lists of objects alike.
    """
    if isinstance(document, list):
        for item in document:
            yield from find_container_images(item)
        return
    if not isinstance(document, dict):
        return

    for key, value in document.items():
        if key in KUBERNETES_CONTAINER_KEYS and isinstance(value, list):
            for container in value:
                if isinstance(container, dict) and container.get("image"):
                    yield str(container["image"])
        else:
            yield from find_container_images(value)


def scan_for_images(root: str | os.PathLike) -> list[str]:
    """Find the images referenced by the Kubernetes manifests under a path.

    :param root: Directory or file to scan.
    :return: Unique image references, sorted.

    :raises MirrorScanError: If the path does not exist or a file is not valid YAML.
    """
    root = Path(root)
    if not root.exists():
        raise MirrorScanError("Path to scan for images does not exist", root)

    yaml = YAML(typ="safe")
    images = set()
    for manifest_file in find_manifest_files(root):
        log.debug(f"Scanning [bold]{manifest_file}")
        try:
            documents = list(yaml.load_all(manifest_file))
        except (YAMLError, UnicodeDecodeError) as e:
            raise MirrorScanError(f"Unable to parse YAML: {e}", manifest_file) from e

        for document in documents:
            images.update(find_container_images(document))

    return sorted(images)
