"""
Tests for configuration loading and the component factory.
"""

import pytest
import yaml
from pydantic import ValidationError

from table_modeler.config import (
    ConfigLoader,
    ModelerConfig,
    create_classifier,
    create_logger,
    create_metadata_service,
)
from table_modeler.platform import CatalogMetadataService


def write_config(path, data):
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestModelerConfig:
    """Tests for the configuration models."""

    def test_catalog_only(self):
        config = ModelerConfig(catalog="catalog.yaml")

        assert config.builder.discriminator_column == "sys_class_name"
        assert config.builder.integer_types == ["integer", "longint"]
        assert config.logging.level == "INFO"

    def test_requires_a_source(self):
        with pytest.raises(ValidationError):
            ModelerConfig()

    def test_rejects_two_sources(self):
        with pytest.raises(ValidationError):
            ModelerConfig(
                catalog="catalog.yaml",
                platform={
                    "url": "https://example.com",
                    "database": "db",
                    "username": "u",
                    "password": "p",
                },
            )

    def test_platform_url_normalized(self):
        config = ModelerConfig(platform={
            "url": "https://example.com/",
            "database": "db",
            "username": "u",
            "password": "p",
        })

        assert config.platform.url == "https://example.com"

    def test_platform_url_scheme(self):
        with pytest.raises(ValidationError):
            ModelerConfig(platform={
                "url": "example.com",
                "database": "db",
                "username": "u",
                "password": "p",
            })


class TestConfigLoader:
    """Tests for ConfigLoader."""

    def test_env_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TEST_PLATFORM_PASSWORD", "s3cret")
        path = write_config(tmp_path / "config.yaml", {
            "platform": {
                "url": "https://example.com",
                "database": "db",
                "username": "reader",
                "password": "${TEST_PLATFORM_PASSWORD}",
            },
        })

        config = ConfigLoader().load(path)

        assert config.platform.password == "s3cret"

    def test_missing_env_var(self, tmp_path, monkeypatch):
        monkeypatch.delenv("TEST_UNSET_VARIABLE", raising=False)
        path = write_config(tmp_path / "config.yaml", {"catalog": "${TEST_UNSET_VARIABLE}"})

        with pytest.raises(ValueError, match="TEST_UNSET_VARIABLE"):
            ConfigLoader().load(path)

    def test_relative_catalog_path(self, tmp_path):
        (tmp_path / "conf").mkdir()
        path = write_config(tmp_path / "conf" / "config.yaml", {"catalog": "catalog.yaml"})

        config = ConfigLoader().load(path)

        assert config.catalog == str(tmp_path / "conf" / "catalog.yaml")

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigLoader().load(tmp_path / "nope.yaml")

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")

        with pytest.raises(ValueError, match="dictionary"):
            ConfigLoader().load(path)

    def test_validate_file(self, tmp_path):
        path = write_config(tmp_path / "config.yaml", {"name": "no source"})

        errors = ConfigLoader().validate_file(path)

        assert len(errors) == 1
        assert "exactly one" in errors[0]

    def test_create_example_config(self, tmp_path, monkeypatch):
        path = tmp_path / "out" / "config.yaml"

        ConfigLoader.create_example_config(path)

        for name in ("PLATFORM_URL", "PLATFORM_DB", "PLATFORM_USER", "PLATFORM_PASSWORD"):
            monkeypatch.setenv(name, "https://example.com" if name == "PLATFORM_URL" else "x")
        config = ConfigLoader().load(path)
        assert config.platform.url == "https://example.com"
        assert config.builder.discriminator_column == "sys_class_name"


class TestFactory:
    """Tests for building components from configuration."""

    def test_catalog_service(self, catalog_file):
        config = ModelerConfig(catalog=str(catalog_file))

        service = create_metadata_service(config)

        assert isinstance(service, CatalogMetadataService)
        assert service.resolve_table("incident") is not None

    def test_classifier_settings(self):
        config = ModelerConfig(
            catalog="catalog.yaml",
            builder={
                "discriminator_column": None,
                "reference_types": ["reference", "document_id"],
                "integer_types": ["integer"],
            },
        )

        classifier = create_classifier(config)

        assert classifier.is_discriminator("sys_class_name") is False
        assert classifier.reference_types == {"reference", "document_id"}
        assert "longint" not in classifier.integer_types

    def test_logger_console_override(self, tmp_path):
        config = ModelerConfig(
            catalog="catalog.yaml",
            logging={"output_dir": str(tmp_path / "logs"), "console_output": True},
        )

        logger = create_logger(config, console_output=False)

        assert logger.console_output is False
        assert logger.output_dir == tmp_path / "logs"
