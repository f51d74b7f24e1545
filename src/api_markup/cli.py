"""CLI entry point for api-markup."""

import logging
from pathlib import Path

import click

from api_markup.builder.labels import Labels, supported_languages
from api_markup.config import GroupBy, Language, LineSeparator, MarkupConfig, MarkupLanguage, Ordering
from api_markup.converter import Converter
from api_markup.errors import MarkupError
from api_markup.extension.dynamic import DynamicContentExtension
from api_markup.extension.registry import ExtensionRegistry
from api_markup.extension.restdocs import SpringRestDocsExtension
from api_markup.extension.schema import SchemaExtension


def _choices(enum) -> click.Choice:
    return click.Choice([member.value for member in enum])


def _build_registry(extensions_dir: Path | None, schemas_dir: Path | None, restdocs_dir: Path | None) -> ExtensionRegistry:
    registry = ExtensionRegistry()
    if extensions_dir:
        registry.add(DynamicContentExtension(extensions_dir, "paths"))
        registry.add(DynamicContentExtension(extensions_dir, "definitions"))
    if schemas_dir:
        registry.add(SchemaExtension(schemas_dir))
    if restdocs_dir:
        registry.add(SpringRestDocsExtension(restdocs_dir))
    return registry


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log pipeline progress.")
def main(verbose: bool):
    """Generate AsciiDoc or Markdown documentation from Swagger 2.0 specs."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command("convert")
@click.argument("spec_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", type=click.Path(file_okay=False, path_type=Path), help="Output directory for the generated documents.")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the combined document instead of writing files.")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML config file.")
@click.option("--markup", type=_choices(MarkupLanguage), default=None, help="Markup language.")
@click.option("--group-by", type=_choices(GroupBy), default=None, help="How operations are grouped.")
@click.option("--operation-ordering", type=_choices(Ordering), default=None)
@click.option("--tag-ordering", type=_choices(Ordering), default=None)
@click.option("--definition-ordering", type=_choices(Ordering), default=None)
@click.option("--inline-depth", type=click.IntRange(min=0), default=None, help="Inline schema depth promoted to definitions.")
@click.option("--separate-definitions", is_flag=True, help="One file per definition.")
@click.option("--separate-operations", is_flag=True, help="One file per operation.")
@click.option("--language", type=_choices(Language), default=None, help="Output language of headings.")
@click.option("--generated-examples", is_flag=True, help="Synthesize examples for schemas without one.")
@click.option("--definition-descriptions", type=click.Path(exists=True, file_okay=False, path_type=Path), default=None)
@click.option("--line-separator", type=_choices(LineSeparator), default=None)
@click.option("--extensions-dir", type=click.Path(exists=True, file_okay=False, path_type=Path), default=None,
              help="Directory of dynamic content for paths and definitions.")
@click.option("--schemas-dir", type=click.Path(exists=True, file_okay=False, path_type=Path), default=None)
@click.option("--restdocs-dir", type=click.Path(exists=True, file_okay=False, path_type=Path), default=None)
def convert_cmd(
    spec_path: Path,
    output: Path | None,
    to_stdout: bool,
    config_path: Path | None,
    markup: str | None,
    group_by: str | None,
    operation_ordering: str | None,
    tag_ordering: str | None,
    definition_ordering: str | None,
    inline_depth: int | None,
    separate_definitions: bool,
    separate_operations: bool,
    language: str | None,
    generated_examples: bool,
    definition_descriptions: Path | None,
    line_separator: str | None,
    extensions_dir: Path | None,
    schemas_dir: Path | None,
    restdocs_dir: Path | None,
):
    """Convert a Swagger 2.0 document into markup documents."""
    if output is None and not to_stdout:
        raise click.UsageError("Either -o/--output or --stdout is required.")

    try:
        config = MarkupConfig.from_file(config_path) if config_path else MarkupConfig()
        config = config.merged(
            markup_language=markup,
            group_by=group_by,
            operation_ordering=operation_ordering,
            tag_ordering=tag_ordering,
            definition_ordering=definition_ordering,
            inline_schema_depth_level=inline_depth,
            separated_definitions=separate_definitions or None,
            separated_operations=separate_operations or None,
            output_language=language,
            generated_examples=generated_examples or None,
            definition_descriptions_path=definition_descriptions,
            line_separator=line_separator,
        )
        registry = _build_registry(extensions_dir, schemas_dir, restdocs_dir)

        click.echo(f"Parsing {spec_path}...", err=to_stdout)
        converter = Converter.from_path(spec_path, config=config, registry=registry)
        click.echo(f"Found {len(converter.spec.operations)} operations.", err=to_stdout)

        tree = converter.build()
        if to_stdout:
            click.echo(tree.as_string(), nl=False)
            return

        written = tree.into_folder(output)
    except MarkupError as e:
        raise click.ClickException(e.describe()) from e

    for file_path in written:
        click.echo(f"  Created {file_path}")
    click.echo(f"Generated {len(written)} files in {output}")


@main.command("labels")
@click.option("--language", default="en", help=f"One of: {', '.join(supported_languages())}.")
def labels_cmd(language: str):
    """Print the heading labels of a language."""
    for key, text in Labels(language).table().items():
        click.echo(f"{key}: {text}")
