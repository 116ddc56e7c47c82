"""Unit tests for ProtocConfig."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError as PydanticValidationError

from protopath_core.config import DEFAULT_LOCAL_REPOSITORY, ProtocConfig, Scope
from protopath_core.errors import ConfigurationError


class TestForScope:
    """Tests for ProtocConfig.for_scope defaults."""

    def test_main_scope_defaults(self, tmp_path: Path) -> None:
        config = ProtocConfig.for_scope("main", base_dir=tmp_path)

        assert config.scope is Scope.MAIN
        assert config.proto_source_root == tmp_path / "src/main/proto"
        assert config.output_directory == tmp_path / "target/generated-sources/protoc"
        assert config.temporary_proto_file_directory == tmp_path / "target/protoc-dependencies"
        assert config.protoc_executable == "protoc"
        assert config.includes == ("**/*.proto",)
        assert config.excludes == ()
        assert config.language == "python"
        assert config.local_repository == DEFAULT_LOCAL_REPOSITORY

    def test_test_scope_defaults(self, tmp_path: Path) -> None:
        config = ProtocConfig.for_scope(Scope.TEST, base_dir=tmp_path)

        assert config.proto_source_root == tmp_path / "src/test/proto"
        assert config.output_directory == tmp_path / "target/generated-test-sources/protoc"
        assert (
            config.temporary_proto_file_directory
            == tmp_path / "target/protoc-test-dependencies"
        )

    def test_overrides_are_resolved_against_base_dir(self, tmp_path: Path) -> None:
        config = ProtocConfig.for_scope(
            base_dir=tmp_path,
            proto_source_root="protos",
            additional_protopath_elements=["third_party", "/abs/include"],
            dependencies=["lib/a.jar"],
        )

        assert config.proto_source_root == tmp_path / "protos"
        assert config.additional_protopath_elements == (
            tmp_path / "third_party",
            Path("/abs/include"),
        )
        assert config.dependencies == (tmp_path / "lib/a.jar",)

    def test_none_overrides_are_ignored(self, tmp_path: Path) -> None:
        config = ProtocConfig.for_scope(base_dir=tmp_path, output_directory=None)
        assert config.output_directory == tmp_path / "target/generated-sources/protoc"

    def test_unknown_scope_raises(self) -> None:
        with pytest.raises(ValueError):
            ProtocConfig.for_scope("integration")

    def test_invalid_language_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(PydanticValidationError):
            ProtocConfig.for_scope(base_dir=tmp_path, language="--evil")

    def test_config_is_frozen(self, tmp_path: Path) -> None:
        config = ProtocConfig.for_scope(base_dir=tmp_path)
        with pytest.raises(PydanticValidationError):
            config.language = "java"  # type: ignore[misc]


class TestFromYaml:
    """Tests for ProtocConfig.from_yaml."""

    def test_loads_and_resolves_relative_to_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "service/protopath.yaml"
        config_file.parent.mkdir()
        config_file.write_text(
            "scope: test\n"
            "protoc_executable: /usr/local/bin/protoc\n"
            "local_repository: cache\n"
            "excludes:\n"
            "  - '**/internal/*.proto'\n"
            "dependencies: lib/common.jar\n"
        )

        config = ProtocConfig.from_yaml(config_file)

        base = tmp_path / "service"
        assert config.scope is Scope.TEST
        assert config.proto_source_root == base / "src/test/proto"
        assert config.protoc_executable == "/usr/local/bin/protoc"
        assert config.local_repository == base / "cache"
        assert config.excludes == ("**/internal/*.proto",)
        assert config.dependencies == (base / "lib/common.jar",)

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "protopath.yaml"
        config_file.write_text("")

        config = ProtocConfig.from_yaml(config_file)

        assert config.scope is Scope.MAIN
        assert config.proto_source_root == tmp_path / "src/main/proto"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigurationError, match="not found"):
            ProtocConfig.from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        config_file = tmp_path / "protopath.yaml"
        config_file.write_text("includes: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML") as exc_info:
            ProtocConfig.from_yaml(config_file)
        assert exc_info.value.file_path == str(config_file)

    def test_unknown_field(self, tmp_path: Path) -> None:
        config_file = tmp_path / "protopath.yaml"
        config_file.write_text("protoc_exe: protoc\n")

        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            ProtocConfig.from_yaml(config_file)

    def test_unknown_scope(self, tmp_path: Path) -> None:
        config_file = tmp_path / "protopath.yaml"
        config_file.write_text("scope: nightly\n")

        with pytest.raises(ConfigurationError):
            ProtocConfig.from_yaml(config_file)

    def test_top_level_must_be_mapping(self, tmp_path: Path) -> None:
        config_file = tmp_path / "protopath.yaml"
        config_file.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            ProtocConfig.from_yaml(config_file)

    def test_overrides_replace_file_values(self, tmp_path: Path) -> None:
        config_file = tmp_path / "protopath.yaml"
        config_file.write_text("scope: main\nlanguage: java\nexcludes: ['**/old/*.proto']\n")

        config = ProtocConfig.from_yaml(
            config_file,
            scope="test",
            language="cpp",
            excludes=None,
            proto_source_root=tmp_path / "elsewhere",
        )

        assert config.scope is Scope.TEST
        assert config.language == "cpp"
        assert config.excludes == ("**/old/*.proto",)
        assert config.proto_source_root == tmp_path / "elsewhere"
        assert config.output_directory == tmp_path / "target/generated-test-sources/protoc"
