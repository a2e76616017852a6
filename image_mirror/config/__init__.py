from image_mirror.config.auth import Auth
from image_mirror.config.manifest import Manifest
from image_mirror.config.path import RegistryPath
from image_mirror.config.source import Source
from image_mirror.config.target import Target

__all__ = [
    "Auth",
    "Manifest",
    "RegistryPath",
    "Source",
    "Target",
]
