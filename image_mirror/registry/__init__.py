from image_mirror.registry.client import RegistryClient

__all__ = ["RegistryClient"]
