"""Front matter reader.

A document may start with a YAML block::

    ---
    title: Widgets API
    http:
      server: https://api.example.com
      headers:
        - key: Content-Type
          value: application/json
      query:
        - key: api-version
          value: 2
    ---

``headers`` and ``query`` are lists of ``{key, value}`` pairs so that order
and duplicate keys survive. Unknown keys are rejected to catch typos early.
"""

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from reqmd.errors import FrontMatterError
from reqmd.parser.base import GlobalDefaults, MetaData
from reqmd.parser.markdown import FrontMatter, Root


class _FrontMatterSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = None
    description: str | None = None
    http: GlobalDefaults = Field(default_factory=GlobalDefaults)


def read_meta(root: Root) -> MetaData:
    """Read MetaData from the first child of ``root`` if it is front matter."""
    first = root.children[0] if root.children else None
    if not isinstance(first, FrontMatter):
        return MetaData()

    data = load_front_matter(first.value)
    return MetaData(
        title=data.title,
        description=data.description,
        http=data.http,
        position=first.position,
    )


def load_front_matter(text: str) -> _FrontMatterSchema:
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise FrontMatterError(text, str(e)) from e

    if raw is None:
        return _FrontMatterSchema()
    if not isinstance(raw, dict):
        raise FrontMatterError(text, f"expected a mapping, found {type(raw).__name__}")

    try:
        return _FrontMatterSchema.model_validate(raw)
    except ValidationError as e:
        raise FrontMatterError(text, _describe(e)) from e


def _describe(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)
