"""Typed output blocks produced by the section builders."""

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict


class _Block(BaseModel):
    model_config = ConfigDict(frozen=True)


class Heading(_Block):
    """A heading; ``key`` is the untranslated label it was built from."""

    kind: Literal["heading"] = "heading"
    level: int
    text: str
    key: str = ""
    anchor: str = ""


class Paragraph(_Block):
    kind: Literal["paragraph"] = "paragraph"
    text: str


class Table(_Block):
    kind: Literal["table"] = "table"
    headers: list[str]
    rows: list[list[str]]
    key: str = ""


class CodeBlock(_Block):
    kind: Literal["code"] = "code"
    text: str
    language: str = ""


class BulletList(_Block):
    kind: Literal["list"] = "list"
    items: list[str]


class Raw(_Block):
    """Markup passed through verbatim, e.g. extension file content."""

    kind: Literal["raw"] = "raw"
    text: str


class Include(_Block):
    """Reference to another document of the tree."""

    kind: Literal["include"] = "include"
    target: str
    title: str = ""


Block = Union[Heading, Paragraph, Table, CodeBlock, BulletList, Raw, Include]
