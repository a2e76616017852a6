import os
from pathlib import Path
from typing import Union, List


class MirrorError(Exception):
    """Base class for all image-mirror exceptions"""

    pass


class MirrorFileError(MirrorError):
    """Generic error for file/directory issues"""

    def __init__(
        self,
        message: str = None,
        filepath: Union[str, bytes, os.PathLike] | List[Union[str, bytes, os.PathLike]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.filepath = filepath

        if filepath:
            filepath_note = f"Expected filepath(s): "
            if isinstance(filepath, (str, bytes, os.PathLike)):
                filepath_note += f"  - {filepath}\n"
            elif isinstance(filepath, list):
                for f in filepath:
                    filepath_note += f"  - {f}\n"
            self.add_note(filepath_note)


class MirrorDecodeError(MirrorError):
    """Error for a persisted manifest that could not be decoded"""

    def __init__(self, message: str = None, filepath: Path | None = None, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.filepath = filepath
        self.__cause__ = cause

    def __str__(self) -> str:
        s = f"{self.message}"
        if self.filepath:
            s += f"\n  - Manifest: {self.filepath}"
        if self.__cause__ is not None:
            s += f"\n  - Cause: {self.__cause__}"
        return s


class MirrorEncodeError(MirrorError):
    """Error for a manifest that could not be serialized"""

    def __init__(self, message: str = None, filepath: Path | None = None, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.filepath = filepath
        self.__cause__ = cause

    def __str__(self) -> str:
        s = f"{self.message}"
        if self.filepath:
            s += f"\n  - Manifest: {self.filepath}"
        if self.__cause__ is not None:
            s += f"\n  - Cause: {self.__cause__}"
        return s


class MirrorVersionParseError(MirrorError):
    """Error for an image tag that is not a valid version"""

    def __init__(self, version: str, image: str | None = None) -> None:
        super().__init__(f"Version '{version}' did not parse correctly")
        self.version = version
        self.image = image

    def __str__(self) -> str:
        s = f"Version '{self.version}' did not parse correctly"
        if self.image:
            s += f" for image {self.image}"
        return s


class MirrorRegistryListError(MirrorError):
    """Error for a failure to list the tags of a registry repository"""

    def __init__(
        self,
        message: str = None,
        host: str | None = None,
        repository: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.host = host
        self.repository = repository
        self.status_code = status_code

    def __str__(self) -> str:
        s = f"{self.message}\n"
        if self.host:
            s += f"  - Host: {self.host}\n"
        if self.repository:
            s += f"  - Repository: {self.repository}\n"
        if self.status_code is not None:
            s += f"  - Status code: {self.status_code}\n"
        return s


class MirrorScanError(MirrorError):
    """Error for a failure to autodetect images in a source tree"""

    def __init__(self, message: str = None, filepath: Union[str, os.PathLike] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.filepath = filepath

    def __str__(self) -> str:
        s = f"{self.message}"
        if self.filepath:
            s += f"\n  - Path: {self.filepath}"
        return s
