import pytest
from pydantic import ValidationError

from api_markup.config import GroupBy, Language, LineSeparator, MarkupConfig, MarkupLanguage, Ordering
from api_markup.errors import ConfigError


class TestMarkupConfig:
    def test_defaults(self):
        config = MarkupConfig()
        assert config.markup_language is MarkupLanguage.ASCIIDOC
        assert config.group_by is GroupBy.AS_IS
        assert config.operation_ordering is Ordering.AS_IS
        assert config.inline_schema_depth_level == 0
        assert config.output_language is Language.EN
        assert config.extension == ".adoc"

    def test_is_immutable(self):
        config = MarkupConfig()
        with pytest.raises(ValidationError):
            config.group_by = GroupBy.TAGS

    def test_line_separators(self):
        assert LineSeparator.UNIX.chars == "\n"
        assert LineSeparator.WINDOWS.chars == "\r\n"
        assert LineSeparator.MAC.chars == "\r"

    def test_negative_depth_rejected(self):
        with pytest.raises(ConfigError):
            MarkupConfig.from_mapping({"inline_schema_depth_level": -1})

    def test_merged_ignores_none(self):
        config = MarkupConfig(markup_language=MarkupLanguage.MARKDOWN)
        merged = config.merged(markup_language=None, group_by="tags")
        assert merged.markup_language is MarkupLanguage.MARKDOWN
        assert merged.group_by is GroupBy.TAGS
        assert merged.extension == ".md"


class TestFromFile:
    def test_load_yaml(self, tmp_path):
        path = tmp_path / "markup.yaml"
        path.write_text("output_language: de\nseparated_definitions: true\n", encoding="utf-8")
        config = MarkupConfig.from_file(path)
        assert config.output_language is Language.DE
        assert config.separated_definitions is True

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "markup.yaml"
        path.write_text("", encoding="utf-8")
        assert MarkupConfig.from_file(path) == MarkupConfig()

    def test_unknown_option(self, tmp_path):
        path = tmp_path / "markup.yaml"
        path.write_text("colour: blue\n", encoding="utf-8")
        with pytest.raises(ConfigError) as exc:
            MarkupConfig.from_file(path)
        assert exc.value.stage == "config"

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "markup.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping"):
            MarkupConfig.from_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Cannot read config"):
            MarkupConfig.from_file(tmp_path / "missing.yaml")
