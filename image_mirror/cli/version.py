import typer

from image_mirror import __version__
from image_mirror.log import stdout_console


def version():
    """Display the version of image-mirror"""
    stdout_console.print(f"image-mirror v{__version__}", highlight=False)
    raise typer.Exit()
