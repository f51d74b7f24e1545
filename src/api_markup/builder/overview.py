"""Overview section: title, description, version, contact, license, URI scheme, tags."""

from api_markup.builder.blocks import Block, BulletList, Heading, Paragraph
from api_markup.builder.labels import Labels
from api_markup.builder.markup import bold, monospace
from api_markup.builder.section import SectionOutput
from api_markup.config import MarkupConfig
from api_markup.extension.registry import AFTER, BEFORE, BEGIN, END, Dispatcher
from api_markup.model.grouping import GroupTree
from api_markup.model.schema import ResolvedModel

SECTION = "overview"


def build_overview(
    model: ResolvedModel,
    groups: GroupTree,
    config: MarkupConfig,
    labels: Labels,
    dispatch: Dispatcher,
) -> SectionOutput:
    spec = model.spec
    info = spec.info
    language = config.markup_language

    def field(key: str, value: str) -> Paragraph:
        return Paragraph(text=f"{bold(labels.get(key), language)} : {value}")

    blocks: list[Block] = []
    blocks.extend(dispatch(SECTION, BEFORE, level=0))
    blocks.append(Heading(level=0, text=info.title or labels.get("overview")))
    blocks.extend(dispatch(SECTION, BEGIN, level=1))

    blocks.append(Heading(level=1, text=labels.get("overview"), key="overview"))
    if info.description:
        blocks.append(Paragraph(text=info.description))

    if info.version:
        blocks.append(Heading(level=2, text=labels.get("current_version"), key="current_version"))
        blocks.append(field("version", info.version))

    contact = info.contact
    if contact and (contact.name or contact.email or contact.url):
        blocks.append(Heading(level=2, text=labels.get("contact_information"), key="contact_information"))
        if contact.name:
            blocks.append(field("contact_name", contact.name))
        if contact.email:
            blocks.append(field("contact_email", contact.email))
        if contact.url:
            blocks.append(field("contact_url", contact.url))

    license_ = info.license
    if (license_ and license_.name) or info.terms_of_service:
        blocks.append(Heading(level=2, text=labels.get("license_information"), key="license_information"))
        if license_ and license_.name:
            blocks.append(field("license", license_.name))
        if license_ and license_.url:
            blocks.append(field("license_url", license_.url))
        if info.terms_of_service:
            blocks.append(field("terms_of_service", info.terms_of_service))

    # The URI scheme block exists only when schemes are declared.
    if spec.schemes:
        blocks.append(Heading(level=2, text=labels.get("uri_scheme"), key="uri_scheme"))
        if spec.host:
            blocks.append(field("host", spec.host))
        if spec.base_path:
            blocks.append(field("base_path", spec.base_path))
        blocks.append(field("schemes", ", ".join(s.upper() for s in spec.schemes)))

    if spec.tags:
        blocks.append(Heading(level=2, text=labels.get("tags"), key="tags"))
        blocks.append(BulletList(items=[
            f"{t.name} : {t.description}" if t.description else t.name for t in spec.tags
        ]))

    if spec.consumes:
        blocks.append(Heading(level=2, text=labels.get("consumes"), key="consumes"))
        blocks.append(BulletList(items=[monospace(c, language) for c in spec.consumes]))

    if spec.produces:
        blocks.append(Heading(level=2, text=labels.get("produces"), key="produces"))
        blocks.append(BulletList(items=[monospace(p, language) for p in spec.produces]))

    blocks.extend(dispatch(SECTION, END, level=2))
    blocks.extend(dispatch(SECTION, AFTER, level=1))
    return SectionOutput(name=SECTION, blocks=blocks)
