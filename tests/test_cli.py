"""CLI behavior tests for license-validator."""
import json
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner, Result
from structlog.testing import capture_logs

from license_validator import __version__
from license_validator.cli import main
from license_validator.constants import EXIT_ERROR, EXIT_INVALID, EXIT_SUCCESS

ALLOW = ["--allow", "MIT", "--allow", "Apache-2.0"]
SKIP_ALL = ["--skip-test-scope", "--skip-provided-scope", "--skip-optionals"]


@pytest.fixture(autouse=True)
def _silence_logging() -> Iterator[None]:
    """Keep log events out of the captured command output."""
    with patch("license_validator.cli.configure_logging"), capture_logs():
        yield


@pytest.fixture
def results_dir(tmp_path: Path) -> Path:
    """Results directory for the validate and report passes."""
    return tmp_path / "licenses"


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run without picking up a configuration file from the checkout."""
    monkeypatch.chdir(tmp_path)


def run_validate(
    cli_runner: CliRunner, manifest_file: Path, results_dir: Path, *args: str
) -> Result:
    """Invoke the validate command against the sample manifest."""
    return cli_runner.invoke(
        main,
        [
            "validate",
            "--graph",
            str(manifest_file),
            "--results-dir",
            str(results_dir),
            *args,
        ],
    )


def run_report(
    cli_runner: CliRunner, manifest_file: Path, results_dir: Path, *args: str
) -> Result:
    """Invoke the report command against the sample manifest."""
    return cli_runner.invoke(
        main,
        [
            "report",
            "--graph",
            str(manifest_file),
            "--results-dir",
            str(results_dir),
            *args,
        ],
    )


def test_cli_help(cli_runner: CliRunner) -> None:
    """Test that --help lists both commands."""
    result = cli_runner.invoke(main, ["--help"])

    assert result.exit_code == 0
    assert "License Validator" in result.output
    assert "validate" in result.output
    assert "report" in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    """Test that --version outputs correct version."""
    result = cli_runner.invoke(main, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


class TestValidateCommand:
    """Tests for the validate command."""

    def test_invalid_licenses_exit_code(
        self, cli_runner: CliRunner, manifest_file: Path, results_dir: Path
    ) -> None:
        """Test disallowed licenses give the invalid exit code."""
        result = run_validate(cli_runner, manifest_file, results_dir, *ALLOW)

        assert result.exit_code == EXIT_INVALID
        assert "License Validation Results" in result.output
        assert "FAILED - 3 invalid license(s) found" in result.output
        assert (results_dir / "results.txt").is_file()
        assert (results_dir / "settings.properties").is_file()

    def test_all_valid_exit_code(
        self, cli_runner: CliRunner, manifest_file: Path, results_dir: Path
    ) -> None:
        """Test skipping the disallowed dependencies passes."""
        result = run_validate(
            cli_runner, manifest_file, results_dir, *ALLOW, *SKIP_ALL
        )

        assert result.exit_code == EXIT_SUCCESS
        assert "PASS - All 3 artifacts have valid licenses" in result.output

    def test_fail_fast(
        self, cli_runner: CliRunner, manifest_file: Path, results_dir: Path
    ) -> None:
        """Test fail-fast aborts with the invalid exit code and no results."""
        result = run_validate(
            cli_runner, manifest_file, results_dir, *ALLOW, "--fail-fast"
        )

        assert result.exit_code == EXIT_INVALID
        assert "InvalidLicenseError" in result.output
        assert not (results_dir / "results.txt").exists()

    def test_json_format(
        self, cli_runner: CliRunner, manifest_file: Path, results_dir: Path
    ) -> None:
        """Test JSON output on stdout."""
        result = run_validate(
            cli_runner, manifest_file, results_dir, *ALLOW, "--format", "json"
        )

        assert result.exit_code == EXIT_INVALID
        data = json.loads(result.stdout)
        assert data["passed"] is False
        assert data["summary"]["invalid"] == 3
        assert data["settings"]["recursive"] is True

    def test_no_recursive(
        self, cli_runner: CliRunner, manifest_file: Path, results_dir: Path
    ) -> None:
        """Test non-recursive runs skip transitive dependencies."""
        result = run_validate(
            cli_runner,
            manifest_file,
            results_dir,
            *ALLOW,
            "--no-recursive",
            "--format",
            "json",
        )

        data = json.loads(result.stdout)
        artifacts = {r["artifact"] for r in data["results"]}
        assert "org.example:lib-c:1.0" not in artifacts
        assert data["settings"]["recursive"] is False

    def test_empty_allow_list(
        self, cli_runner: CliRunner, manifest_file: Path, results_dir: Path
    ) -> None:
        """Test running without allowed licenses is an error."""
        result = run_validate(cli_runner, manifest_file, results_dir)

        assert result.exit_code == EXIT_ERROR
        assert "ConfigurationError" in result.output

    def test_config_file(
        self,
        cli_runner: CliRunner,
        manifest_file: Path,
        results_dir: Path,
        tmp_path: Path,
    ) -> None:
        """Test allowed licenses and flags from a configuration file."""
        config = tmp_path / "validator.yaml"
        config.write_text(
            "allowed_licenses:\n"
            "  - MIT\n"
            "  - Apache-2.0\n"
            "skip_test_scope: true\n"
            "skip_provided_scope: true\n"
            "skip_optionals: true\n"
        )
        result = run_validate(
            cli_runner, manifest_file, results_dir, "-c", str(config)
        )

        assert result.exit_code == EXIT_SUCCESS

    def test_unwritable_results_exit_code(
        self, cli_runner: CliRunner, results_dir: Path, tmp_path: Path
    ) -> None:
        """Test a license name that cannot be persisted gives the error exit code."""
        graph = tmp_path / "unencodable.yaml"
        graph.write_text(
            "root: g:app:1\n"
            "artifacts:\n"
            "  g:app:1:\n"
            "    dependencies:\n"
            "      - g:a:1\n"
            "  g:a:1:\n"
            "    licenses:\n"
            "      - name: \"bad\\ud800\"\n",
            encoding="utf-8",
        )
        result = run_validate(cli_runner, graph, results_dir, *ALLOW)

        assert result.exit_code == EXIT_ERROR
        assert "PersistenceError" in result.output
        assert not (results_dir / "results.txt").exists()

    def test_graph_and_packages_conflict(
        self, cli_runner: CliRunner, manifest_file: Path, results_dir: Path
    ) -> None:
        """Test packages cannot be combined with a manifest."""
        result = run_validate(
            cli_runner, manifest_file, results_dir, *ALLOW, "requests"
        )

        assert result.exit_code == EXIT_ERROR
        assert "ConfigurationError" in result.output

    def test_verbose_and_quiet_conflict(
        self, cli_runner: CliRunner, manifest_file: Path, results_dir: Path
    ) -> None:
        """Test --verbose and --quiet are mutually exclusive."""
        result = run_validate(
            cli_runner, manifest_file, results_dir, *ALLOW, "-v", "-q"
        )

        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_quiet_output(
        self, cli_runner: CliRunner, manifest_file: Path, results_dir: Path
    ) -> None:
        """Test quiet mode prints the verdict and invalid licenses."""
        result = run_validate(cli_runner, manifest_file, results_dir, *ALLOW, "-q")

        assert result.exit_code == EXIT_INVALID
        assert "License Validation Results" not in result.output
        assert "GPL-3.0" in result.output


class TestReportCommand:
    """Tests for the report command."""

    @pytest.fixture(autouse=True)
    def _validated(
        self, cli_runner: CliRunner, manifest_file: Path, results_dir: Path
    ) -> None:
        """Run the validate pass before each report."""
        run_validate(cli_runner, manifest_file, results_dir, *ALLOW)

    def test_terminal_report(
        self, cli_runner: CliRunner, manifest_file: Path, results_dir: Path
    ) -> None:
        """Test the terminal report succeeds despite invalid licenses."""
        result = run_report(cli_runner, manifest_file, results_dir)

        assert result.exit_code == EXIT_SUCCESS
        assert "Direct Dependencies" in result.output
        assert "Transitive Dependencies" in result.output

    def test_markdown_report(
        self, cli_runner: CliRunner, manifest_file: Path, results_dir: Path
    ) -> None:
        """Test Markdown report on stdout."""
        result = run_report(
            cli_runner, manifest_file, results_dir, "--format", "markdown"
        )

        assert result.exit_code == EXIT_SUCCESS
        assert "# Licenses Report" in result.stdout
        assert "**com.example:app:1.0.0**" in result.stdout

    def test_json_report(
        self, cli_runner: CliRunner, manifest_file: Path, results_dir: Path
    ) -> None:
        """Test JSON report on stdout."""
        result = run_report(cli_runner, manifest_file, results_dir, "--format", "json")

        assert result.exit_code == EXIT_SUCCESS
        data = json.loads(result.stdout)
        assert data["project"] == "com.example:app:1.0.0"
        assert data["summary"]["has_invalid"] is True
        assert data["summary"]["missing_results"] == []

    def test_output_file(
        self,
        cli_runner: CliRunner,
        manifest_file: Path,
        results_dir: Path,
        tmp_path: Path,
    ) -> None:
        """Test terminal format written to a file uses Markdown."""
        target = tmp_path / "reports" / "licenses.md"
        result = run_report(cli_runner, manifest_file, results_dir, "-o", str(target))

        assert result.exit_code == EXIT_SUCCESS
        assert target.read_text(encoding="utf-8").startswith("# Licenses Report")

    def test_output_directory(
        self,
        cli_runner: CliRunner,
        manifest_file: Path,
        results_dir: Path,
        tmp_path: Path,
    ) -> None:
        """Test a directory output gets the default report file name."""
        out_dir = tmp_path / "out"
        out_dir.mkdir()
        result = run_report(
            cli_runner,
            manifest_file,
            results_dir,
            "--format",
            "json",
            "-o",
            str(out_dir),
        )

        assert result.exit_code == EXIT_SUCCESS
        written = out_dir / "dependency-licenses-report.json"
        assert json.loads(written.read_text(encoding="utf-8"))["title"] == (
            "Licenses Report"
        )

    def test_skip_optionals_mismatch(
        self, cli_runner: CliRunner, manifest_file: Path, results_dir: Path
    ) -> None:
        """Test a report with different settings than validation fails."""
        result = run_report(cli_runner, manifest_file, results_dir, "--skip-optionals")

        assert result.exit_code == EXIT_ERROR
        assert "Settings mismatch" in result.output

    def test_missing_results_directory(
        self, cli_runner: CliRunner, manifest_file: Path, tmp_path: Path
    ) -> None:
        """Test a report without a validate pass fails."""
        result = run_report(cli_runner, manifest_file, tmp_path / "nowhere")

        assert result.exit_code == EXIT_ERROR
        assert "ConfigurationError" in result.output
