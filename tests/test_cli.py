import json
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner
from fastapi.testclient import TestClient

from swagdoc.cli import detect_format, load_api, main
from swagdoc.document.api import API
from swagdoc.errors import TargetError

FIXTURES = Path(__file__).parent / "fixtures"
PETSTORE = str(FIXTURES / "petstore.py")


class TestLoadApi:
    def test_file_target_defaults_to_api(self):
        api = load_api(PETSTORE)
        assert isinstance(api, API)
        assert api.info.title == "Swagger Petstore"

    def test_factory_target(self):
        api = load_api(f"{PETSTORE}:build")
        assert "/pet" in api.paths

    def test_module_target(self):
        api = load_api("swagdoc.document.api:new")
        assert api.swagger == "2.0"

    def test_missing_file(self, tmp_path):
        with pytest.raises(TargetError, match="no such file"):
            load_api(str(tmp_path / "missing.py"))

    def test_missing_module(self):
        with pytest.raises(TargetError, match="cannot import"):
            load_api("swagdoc_missing_module")

    def test_missing_attribute(self):
        with pytest.raises(TargetError, match="no attribute"):
            load_api(f"{PETSTORE}:nothing")

    def test_not_an_api(self):
        with pytest.raises(TargetError, match="not an API"):
            load_api(f"{PETSTORE}:__doc__")


class TestDetectFormat:
    def test_explicit(self):
        assert detect_format(Path("out.json"), "yaml") == "yaml"

    def test_auto(self):
        assert detect_format(Path("out.yml"), "auto") == "yaml"
        assert detect_format(Path("out.YAML"), "auto") == "yaml"
        assert detect_format(Path("out.json"), "auto") == "json"
        assert detect_format(None, "auto") == "json"


class TestCliExport:
    def test_export_to_stdout(self):
        runner = CliRunner()
        result = runner.invoke(main, ["export", PETSTORE])

        assert result.exit_code == 0
        doc = json.loads(result.output)
        assert doc["info"]["title"] == "Swagger Petstore"
        assert doc["definitions"]["petstore.Pet"]["required"] == ["name", "photoUrls"]
        assert doc["paths"]["/pet"]["post"]["parameters"][0]["schema"] == {"$ref": "#/definitions/petstore.Pet"}

    def test_export_yaml_file(self, tmp_path):
        output_file = tmp_path / "docs" / "swagger.yaml"
        runner = CliRunner()
        result = runner.invoke(main, ["export", PETSTORE, "-o", str(output_file)])

        assert result.exit_code == 0
        assert "Document saved" in result.output
        doc = yaml.safe_load(output_file.read_text(encoding="utf-8"))
        assert doc["swagger"] == "2.0"
        assert "petstore.Category" in doc["definitions"]

    def test_export_with_config(self, tmp_path):
        config_file = tmp_path / "swagdoc.yaml"
        config_file.write_text("title: From Config\nhost: config.example.com\n", encoding="utf-8")

        runner = CliRunner()
        result = runner.invoke(
            main,
            ["export", PETSTORE, "--config", str(config_file)],
            env={"SWAGDOC_HOST": "env.example.com"},
        )

        assert result.exit_code == 0
        doc = json.loads(result.output)
        assert doc["info"]["title"] == "From Config"
        assert doc["host"] == "env.example.com"

    def test_export_invalid_config(self, tmp_path):
        config_file = tmp_path / "swagdoc.yaml"
        config_file.write_text("titel: typo\n", encoding="utf-8")

        runner = CliRunner()
        result = runner.invoke(main, ["export", PETSTORE, "--config", str(config_file)])

        assert result.exit_code == 1
        assert "titel" in result.output

    def test_export_check_passes(self):
        runner = CliRunner()
        result = runner.invoke(main, ["export", PETSTORE, "--check"])
        assert result.exit_code == 0

    def test_export_check_fails(self):
        runner = CliRunner()
        result = runner.invoke(main, ["export", f"{PETSTORE}:broken", "--check"])

        assert result.exit_code == 1
        assert "duplicate operationId" in result.output

    def test_export_bad_target(self):
        runner = CliRunner()
        result = runner.invoke(main, ["export", "swagdoc_missing_module:api"])

        assert result.exit_code == 1
        assert "cannot import" in result.output


class TestCliServe:
    @patch("swagdoc.cli.uvicorn.run")
    def test_serve(self, mock_run):
        runner = CliRunner()
        result = runner.invoke(main, ["serve", PETSTORE, "--port", "9000", "--url", "/docs.json"])

        assert result.exit_code == 0
        assert "Serving /docs.json on http://127.0.0.1:9000" in result.output
        mock_run.assert_called_once()
        assert mock_run.call_args.kwargs == {"host": "127.0.0.1", "port": 9000}
        app = mock_run.call_args.args[0]
        assert TestClient(app).get("/docs.json").json()["swagger"] == "2.0"
