import functools
import inspect
from pathlib import Path
from typing import Annotated, Optional

import typer

from image_mirror.log import init_logging, verbosity_level

VerboseOption = Annotated[
    bool, typer.Option("--verbose", "-v", help="Log every image checked and every registry request.")
]
QuietOption = Annotated[bool, typer.Option("--quiet", "-q", help="Only log errors. Image listings still print.")]


def with_verbosity_flags(fn):
    """Add --verbose and --quiet to a command and set up logging from them before it runs."""

    @functools.wraps(fn)
    def wrapper(*args, verbose: bool = False, quiet: bool = False, **kwargs):
        try:
            log_level = verbosity_level(verbose, quiet)
        except ValueError as e:
            raise typer.BadParameter(str(e)) from e
        init_logging(log_level)
        return fn(*args, **kwargs)

    # typer reads options from the signature, so expose the command's own parameters plus the flags.
    sig = inspect.signature(fn)
    params = list(sig.parameters.values())
    params.extend(
        [
            inspect.Parameter("verbose", inspect.Parameter.KEYWORD_ONLY, default=False, annotation=VerboseOption),
            inspect.Parameter("quiet", inspect.Parameter.KEYWORD_ONLY, default=False, annotation=QuietOption),
        ]
    )
    wrapper.__signature__ = sig.replace(parameters=params)

    return wrapper


ManifestOption = Annotated[
    Optional[Path],
    typer.Option(
        "--manifest",
        "-m",
        show_default="./.images.yaml",
        help="Path to the image manifest or the directory containing it.",
    ),
]
