"""Tests for cppforge.utils: command execution, name helpers, JSON and output."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

from cppforge.utils import (
    console,
    format_duration,
    load_json,
    load_json_async,
    print_diagnostics,
    run_command,
    to_dir_name,
    to_pascal_case,
    to_snake_case,
)


# ---------------------------------------------------------------------------
# run_command
# ---------------------------------------------------------------------------


class TestRunCommand:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_successful_command(self):
        returncode, stdout, stderr = await run_command(
            [sys.executable, "-c", "print('hello')"]
        )
        assert returncode == 0
        assert stdout == "hello"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failed_command(self):
        returncode, _, _ = await run_command(
            [sys.executable, "-c", "import sys; sys.exit(3)"]
        )
        assert returncode == 3

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_with_cwd(self, tmp_path: Path):
        returncode, stdout, _ = await run_command(
            [sys.executable, "-c", "import os; print(os.getcwd())"], cwd=tmp_path
        )
        assert returncode == 0
        assert Path(stdout).resolve() == tmp_path.resolve()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_timeout(self):
        returncode, _, stderr = await run_command(
            [sys.executable, "-c", "import time; time.sleep(10)"], timeout=1
        )
        assert returncode == -1
        assert "timed out" in stderr

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_with_env(self):
        returncode, stdout, _ = await run_command(
            [sys.executable, "-c", "import os; print(os.environ['CPPFORGE_TEST_VAR'])"],
            env={"CPPFORGE_TEST_VAR": "test_value"},
        )
        assert returncode == 0
        assert stdout == "test_value"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_command_returns_stderr(self):
        _, _, stderr = await run_command(
            [sys.executable, "-c", "import sys; sys.stderr.write('error_msg\\n')"]
        )
        assert stderr == "error_msg"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_program_raises(self):
        with pytest.raises(FileNotFoundError):
            await run_command(["cppforge-nonexistent-binary-12345"])


# ---------------------------------------------------------------------------
# Name helpers
# ---------------------------------------------------------------------------


class TestToSnakeCase:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("MyPlugin", "my_plugin"),
            ("my plugin", "my_plugin"),
            ("my-plugin", "my_plugin"),
            ("myPluginName", "my_plugin_name"),
            ("HTTPServer", "httpserver"),
            ("my_plugin", "my_plugin"),
            ("  my plugin  ", "_my_plugin_"),
            ("my   -  plugin", "my_plugin"),
        ],
    )
    def test_conversion(self, name: str, expected: str):
        assert to_snake_case(name) == expected


class TestToPascalCase:
    @pytest.mark.unit
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("my-plugin", "MyPlugin"),
            ("my_plugin", "MyPlugin"),
            ("my plugin", "MyPlugin"),
            ("MyPlugin", "MyPlugin"),
            ("my_-_plugin", "MyPlugin"),
            ("my@plugin", "My@plugin"),
            ("a", "A"),
            ("", ""),
        ],
    )
    def test_conversion(self, name: str, expected: str):
        assert to_pascal_case(name) == expected


class TestToDirName:
    @pytest.mark.unit
    def test_lowercases_and_dashes_spaces(self):
        assert to_dir_name("My Cool App") == "my-cool-app"

    @pytest.mark.unit
    def test_strips_surrounding_whitespace(self):
        assert to_dir_name("  MyApp ") == "myapp"


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


class TestLoadJson:
    @pytest.mark.unit
    def test_load_object(self, tmp_path: Path):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"key": "value"}), encoding="utf-8")
        assert load_json(path) == {"key": "value"}

    @pytest.mark.unit
    def test_list_is_rejected(self, tmp_path: Path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError, match="Expected a JSON object"):
            load_json(path)

    @pytest.mark.unit
    def test_file_not_found(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_json(tmp_path / "missing.json")

    @pytest.mark.unit
    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            load_json(path)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_async_wrapper(self, tmp_path: Path):
        path = tmp_path / "data.json"
        path.write_text('{"a": 1}', encoding="utf-8")
        assert await load_json_async(path) == {"a": 1}


# ---------------------------------------------------------------------------
# Formatting / output
# ---------------------------------------------------------------------------


class TestFormatDuration:
    @pytest.mark.unit
    def test_seconds(self):
        assert format_duration(3.74) == "3.7s"

    @pytest.mark.unit
    def test_minutes(self):
        assert format_duration(65.2) == "1m 5s"

    @pytest.mark.unit
    def test_negative(self):
        assert format_duration(-1) == "0.0s"


class TestPrintDiagnostics:
    @pytest.mark.unit
    def test_prints_each_message(self):
        with console.capture() as capture:
            print_diagnostics(["first warning", "second warning"])
        output = capture.get()
        assert "first warning" in output
        assert "second warning" in output

    @pytest.mark.unit
    def test_empty_prints_nothing(self):
        with console.capture() as capture:
            print_diagnostics([])
        assert capture.get() == ""
