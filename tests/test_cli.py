from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from api_markup.cli import main
from api_markup.config import GroupBy, MarkupConfig, MarkupLanguage

FIXTURES = Path(__file__).parent / "fixtures"


class TestCliConvert:
    def test_convert_to_folder(self, tmp_path):
        output_dir = tmp_path / "docs"
        runner = CliRunner()
        result = runner.invoke(main, [
            "convert", str(FIXTURES / "petstore.yaml"),
            "-o", str(output_dir),
        ])

        assert result.exit_code == 0, result.output
        assert (output_dir / "overview.adoc").exists()
        assert (output_dir / "security.adoc").exists()
        assert "Generated 4 files" in result.output

    def test_markdown_and_separated_files(self, tmp_path):
        output_dir = tmp_path / "docs"
        runner = CliRunner()
        result = runner.invoke(main, [
            "convert", str(FIXTURES / "petstore.yaml"),
            "-o", str(output_dir),
            "--markup", "markdown",
            "--separate-definitions",
            "--separate-operations",
        ])

        assert result.exit_code == 0, result.output
        assert (output_dir / "definitions" / "Pet.md").exists()
        assert len(list((output_dir / "operations").iterdir())) == 10

    def test_stdout(self):
        runner = CliRunner()
        result = runner.invoke(main, ["convert", str(FIXTURES / "petstore_minimal.json"), "--stdout"])

        assert result.exit_code == 0
        assert "= Minimal Petstore" in result.output
        assert "== Definitions" in result.output

    def test_output_required(self):
        runner = CliRunner()
        result = runner.invoke(main, ["convert", str(FIXTURES / "petstore.yaml")])

        assert result.exit_code != 0
        assert "--stdout" in result.output

    def test_grouping_error_reported(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "convert", str(FIXTURES / "petstore_minimal.json"),
            "-o", str(tmp_path / "docs"),
            "--group-by", "tags",
        ])

        assert result.exit_code == 1
        assert "[group] updatePet" in result.output
        assert not (tmp_path / "docs").exists()

    def test_options_override_config_file(self, tmp_path):
        config_file = tmp_path / "markup.yaml"
        config_file.write_text("markup_language: markdown\ngroup_by: tags\n", encoding="utf-8")

        with patch("api_markup.cli.Converter.from_path") as from_path:
            from_path.return_value.spec.operations = []
            from_path.return_value.build.return_value.into_folder.return_value = []
            runner = CliRunner()
            result = runner.invoke(main, [
                "convert", str(FIXTURES / "petstore.yaml"),
                "-o", str(tmp_path / "docs"),
                "--config", str(config_file),
                "--group-by", "as_is",
            ])

        assert result.exit_code == 0, result.output
        config = from_path.call_args.kwargs["config"]
        assert isinstance(config, MarkupConfig)
        assert config.markup_language is MarkupLanguage.MARKDOWN
        assert config.group_by is GroupBy.AS_IS

    def test_invalid_config_file(self, tmp_path):
        config_file = tmp_path / "markup.yaml"
        config_file.write_text("no_such_option: 1\n", encoding="utf-8")
        runner = CliRunner()
        result = runner.invoke(main, [
            "convert", str(FIXTURES / "petstore.yaml"),
            "--stdout", "--config", str(config_file),
        ])

        assert result.exit_code == 1
        assert "[config]" in result.output

    def test_extension_directories(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [
            "convert", str(FIXTURES / "petstore.yaml"),
            "-o", str(tmp_path / "docs"),
            "--extensions-dir", str(FIXTURES / "extensions"),
            "--schemas-dir", str(FIXTURES / "schemas"),
        ])

        assert result.exit_code == 0, result.output
        definitions = (tmp_path / "docs" / "definitions.adoc").read_text(encoding="utf-8")
        assert "Pet extension" in definitions
        assert "XML Schema" in definitions


class TestCliLabels:
    def test_labels_in_language(self):
        runner = CliRunner()
        result = runner.invoke(main, ["labels", "--language", "ru"])

        assert result.exit_code == 0
        assert "definitions: Определения" in result.output
