"""Security section: one entry per security scheme that an operation uses."""

from api_markup.builder.blocks import Block, Heading, Paragraph, Table
from api_markup.builder.labels import Labels
from api_markup.builder.markup import anchor, bold
from api_markup.builder.section import SectionOutput
from api_markup.config import MarkupConfig
from api_markup.extension.registry import AFTER, BEFORE, BEGIN, END, Dispatcher
from api_markup.model.grouping import GroupTree
from api_markup.model.schema import ResolvedModel

SECTION = "security"


def referenced_schemes(model: ResolvedModel) -> list[str]:
    """Names of the schemes used by any operation, in declaration order."""
    used = {name for op in model.operations for requirement in op.security for name in requirement}
    return [name for name in model.spec.security_definitions if name in used]


def build_security(
    model: ResolvedModel,
    groups: GroupTree,
    config: MarkupConfig,
    labels: Labels,
    dispatch: Dispatcher,
) -> SectionOutput:
    language = config.markup_language

    def field(key: str, value: str) -> Paragraph:
        return Paragraph(text=f"{bold(labels.get(key), language)} : {value}")

    blocks: list[Block] = []
    blocks.extend(dispatch(SECTION, BEFORE, level=1))
    blocks.append(Heading(level=1, text=labels.get("security"), key="security", anchor=anchor("security", language)))
    blocks.extend(dispatch(SECTION, BEGIN, level=2))

    for name in referenced_schemes(model):
        scheme = model.spec.security_definitions[name]
        blocks.extend(dispatch(SECTION, BEFORE, name, 2))
        blocks.append(Heading(level=2, text=name, anchor=anchor(name, language)))
        if scheme.description:
            blocks.append(Paragraph(text=scheme.description))
        blocks.append(field("type", scheme.type))
        if scheme.param_name:
            blocks.append(field("name", scheme.param_name))
        if scheme.location:
            blocks.append(field("location", scheme.location.upper()))
        if scheme.flow:
            blocks.append(field("flow", scheme.flow))
        if scheme.authorization_url:
            blocks.append(field("authorization_url", scheme.authorization_url))
        if scheme.token_url:
            blocks.append(field("token_url", scheme.token_url))
        if scheme.scopes:
            blocks.append(Table(
                headers=[labels.get("name"), labels.get("description")],
                rows=[[scope, description] for scope, description in scheme.scopes.items()],
                key="scopes",
            ))
        blocks.extend(dispatch(SECTION, AFTER, name, 2))

    blocks.extend(dispatch(SECTION, END, level=2))
    blocks.extend(dispatch(SECTION, AFTER, level=1))
    return SectionOutput(name=SECTION, blocks=blocks)
