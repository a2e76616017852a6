import typer

from image_mirror.cli import check, create, listing, version
from image_mirror.const import APP_NAME

app = typer.Typer(
    name=APP_NAME,
    no_args_is_help=True,
    rich_markup_mode="markdown",
    help="A tool for mirroring container images between registries",
)

app.command(
    name="create",
    help="Create a new image manifest (aliases: c, new)",
    rich_help_panel="Manifest Management",
)(create.create)
app.command(name="c", hidden=True)(create.create)
app.command(name="new", hidden=True)(create.create)

app.command(
    name="list",
    help="List the source or target images in the image manifest (aliases: ls)",
    rich_help_panel="Manifest Management",
)(listing.list_images)
app.command(name="ls", hidden=True)(listing.list_images)

app.command(
    name="check",
    help="Check for newer images in the source registries",
    rich_help_panel="Image Updates",
)(check.check)

app.command(name="version", help="Show the image-mirror version")(version.version)
