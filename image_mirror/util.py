import logging
import os
from pathlib import Path
from typing import List, Union

from image_mirror.const import MANIFEST_FILENAMES
from image_mirror.error import MirrorFileError

log = logging.getLogger(__name__)


def find_in_context(context: Union[str, bytes, os.PathLike], name: str, _type: str = "file", parents: int = 0) -> Path:
    """Depth-first search for a directory or file in a context"""
    search = Path(context)
    search_paths: List[Path] = [search]
    # Search up the directory tree
    for _ in range(parents):
        search = search.parent
        search_paths.append(search)

    for search in search_paths:
        if _type == "file" and (search / name).is_file():
            return search / name
        elif _type == "dir" and (search / name).is_dir():
            return search / name

    raise MirrorFileError(f"Could not find {name} in context: {context}")


def resolve_manifest_path(path: Union[str, os.PathLike]) -> Path:
    """Resolve a manifest file from a file path or a directory containing one

    A directory is searched for each of the known manifest file names in order. If none exist, the default file name
    inside the directory is returned so callers can create it.

    :param path: Path to a manifest file or its parent directory.
    :return: The resolved path to the manifest file.
    """
    path = Path(path).resolve()
    if not path.is_dir():
        return path

    for name in MANIFEST_FILENAMES:
        try:
            return find_in_context(path, name)
        except MirrorFileError:
            log.debug(f"No {name} found in {path}")

    return path / MANIFEST_FILENAMES[0]


def auto_path() -> Path:
    context = Path(os.getcwd())
    return context
