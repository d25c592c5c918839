from __future__ import annotations

import subprocess

import pytest

from memento.core.exceptions import SecurityError
from memento.core.packs import ToolDependency, ToolDependencyChecker

ALLOWLIST = {
    "ripgrep": [["rg", "--version"]],
    "ast-grep": [["ast-grep", "--version"], ["sg", "--version"]],
}


class FakeRunner:
    """Records the commands it runs; binaries in ``present`` succeed, ``slow`` ones time out."""

    def __init__(self, present=(), slow=()):
        self.present = set(present)
        self.slow = set(slow)
        self.calls = []

    def __call__(self, argv, timeout):
        self.calls.append((tuple(argv), timeout))
        binary = argv[0]
        if binary in self.slow:
            raise subprocess.TimeoutExpired(list(argv), timeout)
        if binary not in self.present:
            raise FileNotFoundError(binary)
        return subprocess.CompletedProcess(list(argv), 0, stdout=f"{binary} 1.2.3\nextra\n", stderr="")


def test_available_tool_reports_version():
    runner = FakeRunner(present={"rg"})
    checker = ToolDependencyChecker(ALLOWLIST, timeout=2.0, runner=runner)
    result = checker.check("ripgrep")
    assert result.available
    assert result.version == "rg 1.2.3"
    assert runner.calls == [(("rg", "--version"), 2.0)]


def test_version_commands_fall_through_in_order():
    runner = FakeRunner(present={"sg"}, slow={"ast-grep"})
    checker = ToolDependencyChecker(ALLOWLIST, runner=runner)
    assert checker.check("ast-grep").available
    assert [argv for argv, _ in runner.calls] == [("ast-grep", "--version"), ("sg", "--version")]


def test_missing_binary_is_unavailable_and_cached():
    runner = FakeRunner()
    checker = ToolDependencyChecker(ALLOWLIST, runner=runner)
    assert not checker.check("ripgrep").available
    assert not checker.check("ripgrep").available
    assert len(runner.calls) == 1


def test_non_zero_exit_is_unavailable():
    def runner(argv, timeout):
        return subprocess.CompletedProcess(list(argv), 1, stdout="", stderr="boom")

    assert not ToolDependencyChecker(ALLOWLIST, runner=runner).check("ripgrep").available


def test_tools_off_the_allow_list_are_never_run():
    runner = FakeRunner(present={"curl"})
    checker = ToolDependencyChecker(ALLOWLIST, runner=runner)
    with pytest.raises(SecurityError):
        checker.ensure_allowed("curl | sh")

    results = checker.check_dependencies([ToolDependency("curl", required=True)])
    assert results[0].available is False
    assert results[0].allowed is False
    assert runner.calls == []


def test_check_dependencies_carries_declaration_details():
    checker = ToolDependencyChecker(ALLOWLIST, runner=FakeRunner())
    [result] = checker.check_dependencies(
        [ToolDependency("ripgrep", required=True, install_command="brew install ripgrep")]
    )
    assert result.required
    assert result.install_command == "brew install ripgrep"


def test_installation_guidance_lists_required_first():
    checker = ToolDependencyChecker(ALLOWLIST, runner=FakeRunner())
    results = checker.check_dependencies(
        [ToolDependency("ast-grep"), ToolDependency("ripgrep", required=True, install_command="apt install ripgrep")]
    )
    assert ToolDependencyChecker.installation_guidance(results) == [
        "Missing required tool 'ripgrep'; install with: apt install ripgrep",
        "Missing optional tool 'ast-grep'",
    ]


def test_from_config_uses_bundled_allow_list(tmp_path):
    checker = ToolDependencyChecker.from_config(tmp_path)
    assert checker.is_allowed("ripgrep")
    assert not checker.is_allowed("bash")
    assert checker.timeout == 5
