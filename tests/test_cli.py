import json
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from oas_diff.cli import main
from oas_diff.errors import ComparisonError

FIXTURES = Path(__file__).parent / "fixtures"
V1 = str(FIXTURES / "petstore_v1.yaml")
V2 = str(FIXTURES / "petstore_v2.yaml")


class TestCliCompare:
    def test_text_report(self):
        result = CliRunner().invoke(main, ["compare", V1, V2])
        assert result.exit_code == 0
        assert "OPENAPI COMPARISON REPORT" in result.output
        assert "BREAKING CHANGES" in result.output

    def test_fail_on_breaking(self):
        result = CliRunner().invoke(main, ["compare", V1, V2, "--fail-on-breaking"])
        assert result.exit_code == 1

    def test_fail_on_breaking_without_changes(self):
        result = CliRunner().invoke(main, ["compare", V1, V1, "--fail-on-breaking"])
        assert result.exit_code == 0

    def test_json_output_to_file(self, tmp_path):
        output = tmp_path / "reports" / "diff.json"
        result = CliRunner().invoke(main, ["compare", V1, V2, "--format", "json", "-o", str(output)])
        assert result.exit_code == 0
        assert f"Report saved to {output}" in result.output
        data = json.loads(output.read_text())
        assert data["has_breaking_changes"] is True
        assert data["new_version"] == "2.0.0"

    def test_summary_format(self):
        result = CliRunner().invoke(main, ["compare", V1, V1, "--format", "summary"])
        assert result.exit_code == 0
        assert result.output.startswith("[compatible] 1.0.0 -> 1.0.0")

    def test_missing_file_exits_2(self, tmp_path):
        result = CliRunner().invoke(main, ["compare", str(tmp_path / "missing.yaml"), V2])
        assert result.exit_code == 2
        assert "file not found" in result.output

    @patch("oas_diff.cli.ComparisonEngine")
    def test_rule_failure_exits_2(self, MockEngine):
        MockEngine.return_value.compare_locations.side_effect = ComparisonError("Some Rule", KeyError("x"))
        result = CliRunner().invoke(main, ["compare", V1, V2])
        assert result.exit_code == 2
        assert "Some Rule" in result.output

    def test_log_level_from_env(self):
        result = CliRunner().invoke(main, ["compare", V1, V1, "--format", "summary"], env={"OAS_DIFF_LOG_LEVEL": "debug"})
        assert result.exit_code == 0


class TestCliCheck:
    def test_breaking(self):
        result = CliRunner().invoke(main, ["check", V1, V2])
        assert result.exit_code == 1
        assert "[BREAKING]" in result.output
        assert "[CRITICAL] /stores" in result.output

    def test_compatible(self):
        result = CliRunner().invoke(main, ["check", V1, V1])
        assert result.exit_code == 0
        assert "[compatible]" in result.output


class TestCliConvert:
    def test_yaml_to_json_by_default(self):
        result = CliRunner().invoke(main, ["convert", V1])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["info"]["version"] == "1.0.0"

    def test_json_to_yaml_file(self, tmp_path):
        output = tmp_path / "out" / "petstore.yaml"
        result = CliRunner().invoke(main, ["convert", str(FIXTURES / "petstore_v1.json"), "-o", str(output)])
        assert result.exit_code == 0
        assert f"Converted document saved to {output}" in result.output
        assert output.read_text().startswith("openapi:")

    def test_explicit_target(self):
        result = CliRunner().invoke(main, ["convert", V1, "--to", "yaml"])
        assert result.exit_code == 0
        assert "openapi:" in result.output

    def test_missing_file_exits_2(self, tmp_path):
        result = CliRunner().invoke(main, ["convert", str(tmp_path / "missing.yaml")])
        assert result.exit_code == 2
        assert "file not found" in result.output


class TestCliRules:
    def test_lists_rules(self):
        result = CliRunner().invoke(main, ["rules"])
        assert result.exit_code == 0
        assert "Endpoint Removed Rule" in result.output
        assert result.output.strip().endswith("rules")
