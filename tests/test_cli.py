import json
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from api_documentor.analyzer.base import Endpoint
from api_documentor.cli import main
from api_documentor.tester.runner import EndpointTestReport, EndpointTestResult

FIXTURES = Path(__file__).parent / "fixtures"

FLASK_MODULE = '''\
from flask import Flask

app = Flask(__name__)


@app.route("/hello/<name>")
def hello(name):
    """Say hello."""
    return name
'''


def _report(*successes: bool) -> EndpointTestReport:
    endpoint = Endpoint(path="/users", method="GET")
    return EndpointTestReport(
        results=[
            EndpointTestResult(endpoint=endpoint, success=ok, status_code=200 if ok else None, error=None if ok else "boom")
            for ok in successes
        ]
    )


class TestCliAnalyze:
    def test_analyze_openapi_file(self, tmp_path):
        output = tmp_path / "endpoints.json"
        result = CliRunner().invoke(main, ["analyze", "-a", str(FIXTURES / "petstore.yaml"), "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert "Found 3 endpoints." in result.output
        data = json.loads(output.read_text())
        assert [(d["method"], d["path"]) for d in data] == [("GET", "/pets"), ("POST", "/pets"), ("GET", "/pets/:petId")]

    def test_analyze_module_app(self, tmp_path):
        (tmp_path / "hello_service.py").write_text(FLASK_MODULE)
        output = tmp_path / "out" / "endpoints.json"
        result = CliRunner().invoke(
            main,
            ["analyze", "-a", "hello_service:app", "-f", "flask", "--app-dir", str(tmp_path), "-o", str(output)],
        )

        assert result.exit_code == 0, result.output
        (endpoint,) = json.loads(output.read_text())
        assert endpoint["path"] == "/hello/:name"
        assert endpoint["summary"] == "Say hello."

    def test_analyze_missing_module(self, tmp_path):
        result = CliRunner().invoke(main, ["analyze", "-a", "no_such_module_xyz:app", "--app-dir", str(tmp_path)])
        assert result.exit_code == 2
        assert "cannot import" in result.output

    def test_analyze_missing_attribute(self, tmp_path):
        (tmp_path / "empty_service.py").write_text("x = 1\n")
        result = CliRunner().invoke(main, ["analyze", "-a", "empty_service", "--app-dir", str(tmp_path)])
        assert result.exit_code == 2
        assert "has no attribute 'app'" in result.output

    def test_analyze_malformed_document(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("openapi: [unclosed\n")
        result = CliRunner().invoke(main, ["analyze", "-a", str(bad), "-o", str(tmp_path / "out.json")])
        assert result.exit_code == 1
        assert "Invalid API document" in result.output
        assert "Traceback" not in result.output


class TestCliGenerate:
    def test_generate_swagger(self, tmp_path):
        output = tmp_path / "api.json"
        result = CliRunner().invoke(
            main,
            ["generate", "-i", str(FIXTURES / "endpoints.json"), "-o", str(output), "-f", "swagger", "-t", "My API"],
        )

        assert result.exit_code == 0, result.output
        doc = json.loads(output.read_text())
        assert doc["info"]["title"] == "My API"
        assert "/users/{id}" in doc["paths"]

    def test_generate_title_from_config(self, tmp_path):
        output = tmp_path / "api.md"
        result = CliRunner().invoke(
            main,
            ["-c", str(FIXTURES / "config.yaml"), "generate", "-i", str(FIXTURES / "endpoints.json"), "-o", str(output)],
        )

        assert result.exit_code == 0, result.output
        assert output.read_text().startswith("# Example API")

    def test_generate_invalid_input(self, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text('{"path": "/"}')
        result = CliRunner().invoke(main, ["generate", "-i", str(bad), "-o", str(tmp_path / "api.md")])
        assert result.exit_code == 1
        assert "Invalid endpoints file" in result.output


class TestCliTest:
    @patch("api_documentor.cli.run_api_endpoints")
    def test_all_passed(self, mock_run, tmp_path):
        mock_run.return_value = _report(True, True)
        output = tmp_path / "results.json"
        result = CliRunner().invoke(
            main,
            [
                "test", "-i", str(FIXTURES / "endpoints.json"), "-o", str(output),
                "-b", "http://localhost:8000", "-t", "1500", "-s",
                "-p", str(FIXTURES / "params.json"),
                "-H", "Authorization: Bearer abc",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Test results: 2/2 tests passed" in result.output
        endpoints, config = mock_run.call_args.args
        assert len(endpoints) == 2
        assert config.base_url == "http://localhost:8000"
        assert config.timeout == 1500
        assert config.validate_schema is True
        assert config.param_values == {"id": "42", "name": "Grace"}
        assert config.headers == {"Authorization": "Bearer abc"}
        assert len(json.loads(output.read_text())) == 2

    @patch("api_documentor.cli.run_api_endpoints")
    def test_failure_exit_code(self, mock_run, tmp_path):
        mock_run.return_value = _report(True, False)
        output = tmp_path / "results.json"
        result = CliRunner().invoke(main, ["test", "-i", str(FIXTURES / "endpoints.json"), "-o", str(output)])

        assert result.exit_code == 1
        assert "1/2 tests passed" in result.output
        assert json.loads(output.read_text())[1]["error"] == "boom"

    @patch("api_documentor.cli.run_api_endpoints")
    def test_defaults_from_config_file(self, mock_run, tmp_path):
        mock_run.return_value = _report(True)
        result = CliRunner().invoke(
            main,
            ["-c", str(FIXTURES / "config.yaml"), "test", "-i", str(FIXTURES / "endpoints.json"), "-o", str(tmp_path / "r.json")],
        )

        assert result.exit_code == 0, result.output
        config = mock_run.call_args.args[1]
        assert config.base_url == "http://api.example.test"
        assert config.timeout == 2500

    def test_bad_header(self, tmp_path):
        result = CliRunner().invoke(
            main, ["test", "-i", str(FIXTURES / "endpoints.json"), "-o", str(tmp_path / "r.json"), "-H", "no-colon"]
        )
        assert result.exit_code == 2

    def test_timeout_must_be_positive(self, tmp_path):
        result = CliRunner().invoke(main, ["test", "-i", str(FIXTURES / "endpoints.json"), "-t", "0"])
        assert result.exit_code == 2

    def test_params_file_not_a_mapping(self, tmp_path):
        params = tmp_path / "params.json"
        params.write_text("[1, 2]")
        result = CliRunner().invoke(
            main, ["test", "-i", str(FIXTURES / "endpoints.json"), "-o", str(tmp_path / "r.json"), "-p", str(params)]
        )
        assert result.exit_code == 1
        assert "Invalid parameters file" in result.output

    def test_config_file_not_a_mapping(self, tmp_path):
        config = tmp_path / "config.yaml"
        config.write_text("- generate\n- test\n")
        result = CliRunner().invoke(
            main, ["-c", str(config), "test", "-i", str(FIXTURES / "endpoints.json"), "-o", str(tmp_path / "r.json")]
        )
        assert result.exit_code == 1
        assert "Invalid config file" in result.output


class TestCliAuto:
    @patch("api_documentor.cli.run_api_endpoints")
    def test_full_pipeline(self, mock_run, tmp_path):
        mock_run.return_value = _report(True, True, True)
        out_dir = tmp_path / "docs"
        result = CliRunner().invoke(
            main,
            [
                "auto", "-a", str(FIXTURES / "petstore.yaml"), "-o", str(out_dir),
                "-d", "all", "-b", "http://localhost:8080", "--test",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Done!" in result.output
        assert (out_dir / "api-endpoints.json").exists()
        assert (out_dir / "api.md").exists()
        assert json.loads((out_dir / "api.json").read_text())["host"] == "localhost:8080"
        assert (out_dir / "test-results.json").exists()
        config = mock_run.call_args.args[1]
        assert config.validate_schema is True

    @patch("api_documentor.cli.run_api_endpoints")
    def test_without_tests(self, mock_run, tmp_path):
        result = CliRunner().invoke(main, ["auto", "-a", str(FIXTURES / "petstore.yaml"), "-o", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert (tmp_path / "api.md").exists()
        assert not (tmp_path / "api.json").exists()
        mock_run.assert_not_called()
