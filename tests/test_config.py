import pytest
from pydantic import ValidationError

from swagdoc.config import DocumentConfig, from_env, load_config
from swagdoc.document.api import new


class TestLoadConfig:
    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "swagdoc.yaml"
        path.write_text(
            "title: Petstore\n"
            "version: 1.0.2\n"
            "schemes: [https]\n"
            "license_name: MIT\n",
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.title == "Petstore"
        assert config.version == "1.0.2"
        assert config.schemes == ["https"]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == DocumentConfig()

    def test_rejects_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- title\n", encoding="utf-8")
        with pytest.raises(ValueError, match="expected a mapping"):
            load_config(path)

    def test_rejects_unknown_keys(self, tmp_path):
        path = tmp_path / "typo.yaml"
        path.write_text("titel: Petstore\n", encoding="utf-8")
        with pytest.raises(ValidationError):
            load_config(path)


class TestFromEnv:
    def test_reads_prefixed_variables(self):
        config = from_env({
            "SWAGDOC_TITLE": "Petstore",
            "SWAGDOC_HOST": "petstore.swagger.io",
            "SWAGDOC_BASE_PATH": "/v2",
            "SWAGDOC_SCHEMES": "https, http",
            "HOST": "ignored",
        })
        assert config.title == "Petstore"
        assert config.host == "petstore.swagger.io"
        assert config.base_path == "/v2"
        assert config.schemes == ["https", "http"]

    def test_empty_environment(self):
        assert from_env({}) == DocumentConfig()

    def test_reads_os_environ(self, monkeypatch):
        monkeypatch.setenv("SWAGDOC_VERSION", "2.0.1")
        assert from_env().version == "2.0.1"


class TestOptions:
    def test_merged_prefers_other(self):
        base = DocumentConfig(title="file", host="file.example.com")
        merged = base.merged(DocumentConfig(host="env.example.com"))
        assert merged.title == "file"
        assert merged.host == "env.example.com"

    def test_applies_to_api(self):
        config = DocumentConfig(
            title="Petstore",
            contact_email="apiteam@swagger.io",
            license_name="MIT",
            license_url="https://opensource.org/licenses/MIT",
            base_path="/v2",
            schemes=["https"],
        )
        api = new(*config.options())
        doc = api.to_dict()
        assert doc["info"]["title"] == "Petstore"
        assert doc["info"]["contact"] == {"email": "apiteam@swagger.io"}
        assert doc["info"]["license"] == {"name": "MIT", "url": "https://opensource.org/licenses/MIT"}
        assert doc["basePath"] == "/v2"
        assert doc["schemes"] == ["https"]

    def test_unset_values_keep_defaults(self):
        api = new(*DocumentConfig().options())
        assert api.info.title == "Your API Title"

    def test_license_url_keeps_default_name(self):
        api = new(*DocumentConfig(license_url="https://example.com/license").options())
        assert api.info.license.name == "Apache 2.0"
        assert api.info.license.url == "https://example.com/license"

    def test_license_name_keeps_default_url(self):
        api = new(*DocumentConfig(license_name="MIT").options())
        assert api.info.license.name == "MIT"
        assert api.info.license.url == "https://www.apache.org/licenses/LICENSE-2.0.html"
