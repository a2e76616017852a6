import inspect
import logging

import pytest
import typer
from typer.testing import CliRunner

from image_mirror.cli.common import with_verbosity_flags

pytestmark = [pytest.mark.unit]


def list_command(output: str = "-"):
    """Stand-in command with its own option."""
    return output


class TestWithVerbosityFlags:
    def test_signature(self):
        """The wrapped command keeps its own options and gains the flags as keyword-only options."""
        params = inspect.signature(with_verbosity_flags(list_command)).parameters
        assert list(params) == ["output", "verbose", "quiet"]
        assert params["verbose"].kind is inspect.Parameter.KEYWORD_ONLY
        assert params["quiet"].default is False

    @pytest.mark.parametrize(
        "flags,expected",
        [
            pytest.param({}, logging.INFO, id="default"),
            pytest.param({"verbose": True}, logging.DEBUG, id="verbose"),
            pytest.param({"quiet": True}, logging.ERROR, id="quiet"),
        ],
    )
    def test_initializes_logging(self, mocker, flags, expected):
        init_logging = mocker.patch("image_mirror.cli.common.init_logging")
        assert with_verbosity_flags(list_command)(output="images.txt", **flags) == "images.txt"
        init_logging.assert_called_once_with(expected)

    def test_verbose_and_quiet(self, mocker):
        init_logging = mocker.patch("image_mirror.cli.common.init_logging")
        with pytest.raises(typer.BadParameter, match="Cannot set both --verbose and --quiet flags."):
            with_verbosity_flags(list_command)(verbose=True, quiet=True)
        init_logging.assert_not_called()

    def test_flags_on_command_line(self, mocker):
        init_logging = mocker.patch("image_mirror.cli.common.init_logging")
        app = typer.Typer()
        app.command()(with_verbosity_flags(list_command))

        result = CliRunner().invoke(app, ["-v"])
        assert result.exit_code == 0
        init_logging.assert_called_once_with(logging.DEBUG)

        result = CliRunner().invoke(app, ["--verbose", "--quiet"])
        assert result.exit_code == 2
        assert "Cannot set both --verbose and --quiet flags." in result.output
