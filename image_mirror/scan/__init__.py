from image_mirror.scan.kubernetes import scan_for_images

__all__ = ["scan_for_images"]
