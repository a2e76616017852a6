import shutil
from pathlib import Path
from typing import List

import pytest
import requests
from pytest_bdd import given, when, then, parsers
from typer.testing import CliRunner, Result

from image_mirror.cli.main import app
from image_mirror.config import Manifest
from image_mirror.error import MirrorRegistryListError
from image_mirror.registry import RegistryClient

runner = CliRunner()


class MirrorCommand:
    """Class representing an image-mirror command"""

    def __init__(self):
        self.args: List[str] = []
        self.subcommand: List[str] = []
        self.result: Result | None = None
        self.context: Path | None = None
        self.env: dict[str, str] = {"TERM": "dumb", "NO_COLOR": "true", "COLUMNS": "250"}

    def __str__(self):
        return "image-mirror " + " ".join(self.clirunner_args)

    def __repr__(self):
        printable_result = None
        if self.result:
            if self.result.exception is not None:
                printable_result = f"Exception: {self.result.exception}"
            else:
                printable_result = f"Exit Code: {self.result.exit_code}"
        return f"<MirrorCommand<args = '{str(self)}', result = '{printable_result}'>>"

    def reset(self):
        self.args = []
        self.subcommand = []
        self.result = None
        self.context = None
        self.env = {"TERM": "dumb", "NO_COLOR": "true", "COLUMNS": "250"}

    def set_subcommand(self, subcommand: List[str] | str = None):
        if isinstance(subcommand, str):
            subcommand = [subcommand]
        elif subcommand is None:
            subcommand = []
        self.subcommand = subcommand

    @property
    def clirunner_args(self):
        args = []
        if self.subcommand:
            args.extend(self.subcommand)
        if self.context is not None:
            args.extend(["--manifest", str(self.context)])
        if self.args:
            args.extend(self.args)
        return args

    def add_args(self, args: List[str]):
        # Filter out empty strings
        args = [a for a in args if a]
        self.args.extend(args)

    def run(self):
        self.result = runner.invoke(app, self.clirunner_args, catch_exceptions=True, env=self.env)


@pytest.fixture
def mirror_command():
    return MirrorCommand()


@pytest.fixture
def registry_tags() -> dict[tuple[str, str], list[str]]:
    """Tags served by the fake registry, by host and repository"""
    return {}


# Construct the image-mirror command and all arguments
@given("I call image-mirror")
def bare_command(mirror_command):
    mirror_command.reset()


@given(parsers.cfparse("I call image-mirror {commands:String*}", extra_types={"String": str}))
def sub_command(mirror_command, commands: List[str]):
    mirror_command.reset()
    parsed_commands = []
    for command in commands:
        parsed_commands.extend(command.split())
    mirror_command.set_subcommand(parsed_commands)


@given(parsers.parse('with the "{manifest_name}" manifest'))
def with_manifest(mirror_command, manifests_path, manifest_name):
    mirror_command.context = manifests_path / manifest_name


@given("in a temp directory", target_fixture="cli_test_tmpdir")
def tmp_directory(mirror_command, tmp_path) -> Path:
    mirror_command.context = tmp_path
    return tmp_path


@given(parsers.parse('with the "{manifest_name}" manifest in the temp directory'))
def copy_manifest(mirror_command, manifests_path, manifest_name, cli_test_tmpdir):
    shutil.copy(manifests_path / manifest_name, cli_test_tmpdir / ".images.yaml")


@given(parsers.parse('with the Kubernetes "{source_name}" source tree'))
def with_source_tree(mirror_command, kubernetes_path, source_name):
    mirror_command.add_args([str(kubernetes_path / source_name)])


@given("with the arguments:")
def add_args_table(mirror_command, datatable):
    for row in datatable:
        mirror_command.add_args(row)


@given("with the output file in the temp directory", target_fixture="cli_test_output_file")
def with_output_file(mirror_command, tmp_path) -> Path:
    output_file = tmp_path / "images.txt"
    mirror_command.add_args(["--output", str(output_file)])
    return output_file


@given("the registry has the tags:")
def fake_registry(mocker, registry_tags, datatable):
    for host, repository, tags in datatable[1:]:
        registry_tags[(host, repository)] = [t.strip() for t in tags.split(",") if t.strip()]

    def list_tags(host: str, repository: str) -> list[str]:
        if (host, repository) not in registry_tags:
            raise MirrorRegistryListError("Registry returned an error listing tags", host, repository, 404)
        return registry_tags[(host, repository)]

    return mocker.patch.object(RegistryClient, "list_tags", side_effect=list_tags)


@given("the registry is unreachable")
def unreachable_registry(mocker):
    return mocker.patch.object(
        requests.Session, "get", side_effect=requests.exceptions.ConnectionError("Connection refused")
    )


# Run the command
@when("I execute the command", target_fixture="command_logs")
def run(mirror_command, caplog):
    mirror_command.run()
    return caplog


# Check the results of the command
@then("The command succeeds")
def check_success(mirror_command):
    assert mirror_command.result.exit_code == 0


@then(parsers.parse("The command exits with code {exit_code:d}"))
def check_exit_code(mirror_command, exit_code: int):
    assert mirror_command.result.exit_code == exit_code


@then("The command fails")
def check_failure(mirror_command):
    assert mirror_command.result.exit_code != 0


@then("usage is shown")
def check_usage(mirror_command):
    assert "Usage:" in mirror_command.result.stderr


@then("help is shown")
def check_help(mirror_command):
    assert "Usage:" in mirror_command.result.stdout
    assert "Options" in mirror_command.result.stdout


@then("the stdout output includes:")
def check_stdout(mirror_command, datatable):
    for row in datatable:
        assert row[0] in mirror_command.result.stdout


@then("the stdout lines are:")
def check_stdout_lines(mirror_command, datatable):
    assert mirror_command.result.stdout.splitlines() == [row[0] for row in datatable]


@then("the stdout output is empty")
def check_stdout_empty(mirror_command):
    assert mirror_command.result.stdout == ""


@then("the stderr output includes:")
def check_stderr(mirror_command, datatable):
    for row in datatable:
        assert row[0] in mirror_command.result.stderr


@then("the stderr output does not include:")
def check_not_stderr(mirror_command, datatable):
    for row in datatable:
        assert row[0] not in mirror_command.result.stderr


@then("the log includes:")
def check_log(caplog, datatable):
    for row in datatable:
        assert row[0] in caplog.text


@then("the log does not include:")
def check_not_log(caplog, datatable):
    for row in datatable:
        assert row[0] not in caplog.text


@then("the output file lines are:")
def check_output_file(cli_test_output_file, datatable):
    assert cli_test_output_file.read_text().splitlines() == [row[0] for row in datatable]


@then("the temp directory manifest has the source images:")
def check_manifest_sources(cli_test_tmpdir, datatable):
    manifest = Manifest.load(cli_test_tmpdir / ".images.yaml")
    assert manifest.source_images() == [row[0] for row in datatable]


@then(parsers.parse('the temp directory manifest targets "{target}"'))
def check_manifest_target(cli_test_tmpdir, target):
    manifest = Manifest.load(cli_test_tmpdir / ".images.yaml")
    assert manifest.target.path == target


@then("the temp directory manifest has no source images")
def check_manifest_no_sources(cli_test_tmpdir):
    assert Manifest.load(cli_test_tmpdir / ".images.yaml").sources == []
