"""Tests for CLI main module."""

import json as _json
import logging as _logging
import os as _os
import pathlib as _pathlib
import typing as _typing

import click.testing as _click_testing
import pytest as _pytest
import yaml as _yaml

import unchanged
import unchanged.cli as cli


@_pytest.fixture
def document(project_dir: _pathlib.Path) -> _pathlib.Path:
    """A JSON document on disk."""
    path = project_dir / "data.json"
    path.write_text(
        _json.dumps(
            {
                "users": [{"name": "Ada"}, {"name": "Grace"}],
                "settings": {"theme": "dark", "limits": {"rows": 10}},
                "tags": ["a"],
            }
        )
    )
    return path


def _invoke(runner: _click_testing.CliRunner, *args: str, **kwargs: _typing.Any) -> _click_testing.Result:
    return runner.invoke(cli.cli, list(args), **kwargs)


def _json_output(result: _click_testing.Result) -> _typing.Any:
    assert result.exit_code == 0, result.output
    return _json.loads(result.stdout)


class TestCLIBasics:
    """Help and version."""

    def test_help_lists_commands(self, runner: _click_testing.CliRunner) -> None:
        """Help output lists every command."""
        result = _invoke(runner, "--help")

        assert result.exit_code == 0
        for command in ["get", "has", "set", "add", "remove", "merge", "assign"]:
            assert command in result.output, f"Command '{command}' missing from help"

    def test_version(self, runner: _click_testing.CliRunner) -> None:
        """--version shows the package version."""
        result = _invoke(runner, "--version")

        assert result.exit_code == 0
        assert unchanged.__version__ in result.output


class TestReadCommands:
    """get and has."""

    def test_get_value(self, runner: _click_testing.CliRunner, document: _pathlib.Path) -> None:
        """get prints the value as JSON."""
        result = _invoke(runner, "get", "users[1].name", str(document))

        assert _json_output(result) == "Grace"

    def test_get_dotted_index(self, runner: _click_testing.CliRunner, document: _pathlib.Path) -> None:
        """Numeric dotted segments address list items."""
        result = _invoke(runner, "get", "users.0.name", str(document))

        assert _json_output(result) == "Ada"

    def test_get_root(self, runner: _click_testing.CliRunner, document: _pathlib.Path) -> None:
        """'.' addresses the whole document."""
        result = _invoke(runner, "get", ".", str(document))

        assert _json_output(result) == _json.loads(document.read_text())

    def test_get_missing_is_null(self, runner: _click_testing.CliRunner, document: _pathlib.Path) -> None:
        """A missing path prints null."""
        result = _invoke(runner, "get", "nope", str(document))

        assert _json_output(result) is None

    def test_get_default(self, runner: _click_testing.CliRunner, document: _pathlib.Path) -> None:
        """--default is parsed as YAML."""
        result = _invoke(runner, "get", "nope", str(document), "--default", "[1, 2]")

        assert _json_output(result) == [1, 2]

    def test_get_from_stdin(self, runner: _click_testing.CliRunner) -> None:
        """Without FILE the document is read from stdin, YAML included."""
        result = _invoke(runner, "get", "a.b", input="a:\n  b: 3\n")

        assert _json_output(result) == 3

    def test_has_exit_status(self, runner: _click_testing.CliRunner, document: _pathlib.Path) -> None:
        """has exits 0 when present and 1 when missing."""
        assert _invoke(runner, "has", "settings.theme", str(document)).exit_code == 0
        assert _invoke(runner, "has", "settings.font", str(document)).exit_code == 1


class TestWriteCommands:
    """set, add, remove, merge and assign."""

    def test_set_parses_value(self, runner: _click_testing.CliRunner, document: _pathlib.Path) -> None:
        """VALUE is parsed as YAML."""
        result = _invoke(runner, "set", "settings.limits.rows", "20", str(document))

        assert _json_output(result)["settings"]["limits"]["rows"] == 20

    def test_set_raw(self, runner: _click_testing.CliRunner, document: _pathlib.Path) -> None:
        """--raw keeps VALUE as a string."""
        result = _invoke(runner, "set", "settings.limits.rows", "20", str(document), "--raw")

        assert _json_output(result)["settings"]["limits"]["rows"] == "20"

    def test_set_leaves_file_untouched(
        self,
        runner: _click_testing.CliRunner,
        document: _pathlib.Path,
    ) -> None:
        """The input file is never rewritten."""
        before = document.read_text()

        _invoke(runner, "set", "settings.theme", "light", str(document))

        assert document.read_text() == before

    def test_set_creates_branches(self, runner: _click_testing.CliRunner) -> None:
        """Missing branches are created."""
        result = _invoke(runner, "set", "a[0].b", "v", input="{}")

        assert _json_output(result) == {"a": [{"b": "v"}]}

    def test_add_appends(self, runner: _click_testing.CliRunner, document: _pathlib.Path) -> None:
        """add appends to a list."""
        result = _invoke(runner, "add", "tags", "b", str(document))

        assert _json_output(result)["tags"] == ["a", "b"]

    def test_remove(self, runner: _click_testing.CliRunner, document: _pathlib.Path) -> None:
        """remove deletes list items and keys."""
        result = _invoke(runner, "remove", "users[0]", str(document))

        assert _json_output(result)["users"] == [{"name": "Grace"}]

    def test_merge_and_assign(self, runner: _click_testing.CliRunner, document: _pathlib.Path) -> None:
        """merge is deep, assign is shallow."""
        merged = _invoke(runner, "merge", "settings", "{limits: {cols: 4}}", str(document))
        assigned = _invoke(runner, "assign", "settings", "{limits: {cols: 4}}", str(document))

        assert _json_output(merged)["settings"]["limits"] == {"rows": 10, "cols": 4}
        assert _json_output(assigned)["settings"]["limits"] == {"cols": 4}


class TestOutput:
    """Output formatting options and configuration."""

    def test_yaml_format(self, runner: _click_testing.CliRunner, document: _pathlib.Path) -> None:
        """--format yaml writes YAML."""
        result = _invoke(runner, "--format", "yaml", "get", "settings", str(document))

        assert result.exit_code == 0
        assert _yaml.safe_load(result.stdout) == {"theme": "dark", "limits": {"rows": 10}}
        assert "theme: dark" in result.stdout

    def test_compact_json(self, runner: _click_testing.CliRunner, document: _pathlib.Path) -> None:
        """--indent 0 writes a single line."""
        result = _invoke(runner, "--indent", "0", "get", "settings.limits", str(document))

        assert result.stdout.strip() == '{"rows": 10}'

    def test_sort_keys(self, runner: _click_testing.CliRunner) -> None:
        """--sort-keys orders mapping keys."""
        result = _invoke(runner, "--indent", "0", "--sort-keys", "get", ".", input='{"b": 1, "a": 2}')

        assert result.stdout.strip() == '{"a": 2, "b": 1}'

    def test_format_from_project_config(
        self,
        runner: _click_testing.CliRunner,
        project_dir: _pathlib.Path,
    ) -> None:
        """The project config file sets the default format."""
        (project_dir / ".unchanged.yaml").write_text("output:\n  format: yaml\n")

        result = _invoke(runner, "get", ".", input="{a: 1}")

        assert result.stdout.strip() == "a: 1"

    def test_format_from_environment(self, runner: _click_testing.CliRunner) -> None:
        """UNCHANGED_OUTPUT__INDENT sets the indentation."""
        result = _invoke(
            runner,
            "get",
            ".",
            input="{a: 1}",
            env={**_os.environ, "UNCHANGED_OUTPUT__INDENT": "0"},
        )

        assert result.stdout.strip() == '{"a": 1}'

    def test_verbose_logs_debug(self, runner: _click_testing.CliRunner) -> None:
        """-v sends debug records from the package logger to stderr."""
        result = _invoke(runner, "-v", "remove", "missing", input="{a: 1}")

        assert result.exit_code == 0
        assert "Nothing to remove" in result.output
        assert _logging.getLogger("unchanged").level == _logging.DEBUG


class TestErrors:
    """Errors print 'Error: ...' and exit with status 1."""

    def test_bad_path(self, runner: _click_testing.CliRunner) -> None:
        """Malformed paths are reported."""
        result = _invoke(runner, "get", "a[0", input="{}")

        assert result.exit_code == 1
        assert "Error: Invalid path" in result.output

    def test_bad_document(self, runner: _click_testing.CliRunner) -> None:
        """Unparseable documents are reported."""
        result = _invoke(runner, "get", "a", input="{unclosed")

        assert result.exit_code == 1
        assert "Error: Cannot parse document" in result.output

    def test_bad_value(self, runner: _click_testing.CliRunner) -> None:
        """Unparseable values are reported."""
        result = _invoke(runner, "set", "a", "[1,", input="{}")

        assert result.exit_code == 1
        assert "Error: Cannot parse value" in result.output

    def test_string_key_on_list(self, runner: _click_testing.CliRunner) -> None:
        """Writing a named key into a list is reported."""
        result = _invoke(runner, "set", "items.name", "x", input="items: [1]")

        assert result.exit_code == 1
        assert "Error: list keys must be integers" in result.output

    def test_bad_config_file(self, runner: _click_testing.CliRunner, project_dir: _pathlib.Path) -> None:
        """A malformed config file is reported."""
        (project_dir / ".unchanged.yaml").write_text("output: [\n")

        result = _invoke(runner, "get", ".", input="{}")

        assert result.exit_code == 1
        assert "Error: Error in config file" in result.output
