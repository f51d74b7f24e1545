"""Paths section: one entry per operation, bucketed by the group tree."""

from api_markup.builder.blocks import Block, BulletList, CodeBlock, Heading, Include, Paragraph, Table
from api_markup.builder.examples import example_for, format_example
from api_markup.builder.labels import Labels
from api_markup.builder.markup import anchor, bold, monospace
from api_markup.builder.section import (
    OPERATIONS_DIR,
    Links,
    SectionOutput,
    description_text,
    entity_path,
    inline_objects,
    operation_file,
    property_tables,
    schema_label,
    section_file,
    value_text,
)
from api_markup.config import GroupBy, MarkupConfig
from api_markup.extension.registry import (
    AFTER,
    BEFORE,
    BEGIN,
    END,
    PARAMETERS_AFTER,
    PARAMETERS_BEFORE,
    RESPONSES_AFTER,
    RESPONSES_BEFORE,
    Dispatcher,
)
from api_markup.model.grouping import GroupTree
from api_markup.model.schema import ResolvedModel, ResolvedOperation

SECTION = "paths"

GROUP_LEVEL = 2
OPERATION_LEVEL = 3


def build_paths(
    model: ResolvedModel,
    groups: GroupTree,
    config: MarkupConfig,
    labels: Labels,
    dispatch: Dispatcher,
) -> SectionOutput:
    language = config.markup_language
    blocks: list[Block] = []
    entities: dict[str, list[Block]] = {}

    blocks.extend(dispatch(SECTION, BEFORE, level=1))
    blocks.append(Heading(level=1, text=labels.get("paths"), key="paths", anchor=anchor("paths", language)))
    blocks.extend(dispatch(SECTION, BEGIN, level=2))

    for group in groups.leaves():
        title = group.name if groups.strategy is GroupBy.TAGS else group.path
        blocks.append(Heading(level=GROUP_LEVEL, text=title, anchor=anchor(f"{SECTION} {title}", language)))
        if group.description:
            blocks.append(Paragraph(text=group.description))

        for op in group.operations:
            blocks.extend(dispatch(SECTION, BEFORE, op.name, OPERATION_LEVEL, operation=op))
            op_blocks = _operation(op, model, config, labels, dispatch)
            if config.separated_operations:
                entities[entity_path(OPERATIONS_DIR, op.name)] = op_blocks
                blocks.append(Include(target=operation_file(op.name, config), title=op.title))
            else:
                blocks.extend(op_blocks)
            blocks.extend(dispatch(SECTION, AFTER, op.name, OPERATION_LEVEL, operation=op))

    blocks.extend(dispatch(SECTION, END, level=2))
    blocks.extend(dispatch(SECTION, AFTER, level=1))
    return SectionOutput(name=SECTION, blocks=blocks, entities=entities)


def _operation(
    op: ResolvedOperation,
    model: ResolvedModel,
    config: MarkupConfig,
    labels: Labels,
    dispatch: Dispatcher,
) -> list[Block]:
    language = config.markup_language
    links = Links(config, operation_file(op.name, config))
    level = OPERATION_LEVEL
    sub = level + 1

    blocks: list[Block] = [Heading(level=level, text=op.title, anchor=anchor(op.name, language))]
    blocks.extend(dispatch(SECTION, BEGIN, op.name, sub, operation=op))
    blocks.append(CodeBlock(text=f"{op.method} {op.path}"))

    if op.deprecated:
        blocks.append(Paragraph(text=bold(labels.get("deprecated"), language)))

    if op.description:
        blocks.append(Heading(level=sub, text=labels.get("description"), key="description"))
        blocks.append(Paragraph(text=op.description))

    blocks.extend(dispatch(SECTION, PARAMETERS_BEFORE, op.name, sub, operation=op))
    if op.parameters:
        blocks.append(Heading(level=sub, text=labels.get("parameters"), key="parameters"))
        headers = [labels.get(k) for k in ("type", "name", "description", "required", "schema", "default")]
        rows = [
            [
                bold(p.location.capitalize(), language),
                bold(p.name, language) if p.required else p.name,
                p.description,
                labels.get("required") if p.required else labels.get("optional"),
                schema_label(p.schema_, links),
                value_text(p.default),
            ]
            for p in op.parameters
        ]
        blocks.append(Table(headers=headers, rows=rows, key="parameters"))
        blocks.extend(_inline_tables([p.schema_ for p in op.parameters], links, labels, sub + 1))
    blocks.extend(dispatch(SECTION, PARAMETERS_AFTER, op.name, sub, operation=op))

    blocks.extend(dispatch(SECTION, RESPONSES_BEFORE, op.name, sub, operation=op))
    if op.responses:
        blocks.append(Heading(level=sub, text=labels.get("responses"), key="responses"))
        headers = [labels.get(k) for k in ("http_code", "description", "schema")]
        rows = []
        for resp in op.responses:
            description = resp.description
            if resp.headers:
                header_lines = [
                    f"{monospace(h.name, language)} ({schema_label(h, links)}) : {description_text(h, labels, language)}".rstrip(" :")
                    for h in resp.headers
                ]
                description = "\n".join([description, bold(labels.get("headers"), language) + " :"] + header_lines).strip()
            rows.append([
                bold(resp.status, language),
                description,
                schema_label(resp.schema_, links) if resp.schema_ else "",
            ])
        blocks.append(Table(headers=headers, rows=rows, key="responses"))
        blocks.extend(_inline_tables([r.schema_ for r in op.responses if r.schema_], links, labels, sub + 1))
    blocks.extend(dispatch(SECTION, RESPONSES_AFTER, op.name, sub, operation=op))

    for key, values in (("consumes", op.consumes), ("produces", op.produces)):
        if values:
            blocks.append(Heading(level=sub, text=labels.get(key), key=key))
            blocks.append(BulletList(items=[monospace(v, language) for v in values]))

    if op.tags:
        blocks.append(Heading(level=sub, text=labels.get("tags"), key="tags"))
        blocks.append(BulletList(items=list(op.tags)))

    if op.security:
        blocks.append(Heading(level=sub, text=labels.get("security"), key="security"))
        headers = [labels.get(k) for k in ("type", "name", "scopes")]
        security_file = section_file("security", config)
        rows = []
        for requirement in op.security:
            for scheme_name, scopes in requirement.items():
                scheme = model.spec.security_definitions[scheme_name]
                rows.append([
                    bold(scheme.type, language),
                    links.to(scheme_name, scheme_name, security_file),
                    ",".join(scopes),
                ])
        blocks.append(Table(headers=headers, rows=rows, key="security"))

    blocks.extend(_examples(op, model, config, labels, sub))
    blocks.extend(dispatch(SECTION, END, op.name, sub, operation=op))
    return blocks


def _inline_tables(schemas, links: Links, labels: Labels, level: int) -> list[Block]:
    blocks: list[Block] = []
    for obj in inline_objects(schemas):
        blocks.append(Heading(level=level, text=obj.inline_name, anchor=anchor(obj.inline_name, links.language)))
        blocks.extend(property_tables(obj.properties, links, labels, level + 1))
    return blocks


def _examples(op: ResolvedOperation, model: ResolvedModel, config: MarkupConfig, labels: Labels, level: int) -> list[Block]:
    language = config.markup_language
    generate = config.generated_examples
    blocks: list[Block] = []

    for param in op.parameters:
        if param.location != "body":
            continue
        value = example_for(param.schema_, model, generate)
        if value is not None:
            blocks.append(Heading(level=level, text=labels.get("example_request"), key="example_request"))
            blocks.append(CodeBlock(text=format_example(value), language="json"))

    response_blocks: list[Block] = []
    for resp in op.responses:
        if resp.examples:
            for mime, value in resp.examples.items():
                response_blocks.append(Paragraph(text=f"{bold(resp.status, language)} {monospace(mime, language)}"))
                response_blocks.append(CodeBlock(text=format_example(value), language="json"))
        elif resp.schema_ is not None:
            value = example_for(resp.schema_, model, generate)
            if value is not None:
                response_blocks.append(Paragraph(text=bold(resp.status, language)))
                response_blocks.append(CodeBlock(text=format_example(value), language="json"))

    if response_blocks:
        blocks.append(Heading(level=level, text=labels.get("example_response"), key="example_response"))
        blocks.extend(response_blocks)
    return blocks
