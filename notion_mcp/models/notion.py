# Notion Response Models
"""
Tagged variants for Notion API responses.

Responses are decoded on their ``object`` discriminant into one of a closed
set of shapes. Anything that does not decode is kept as ``OpaqueJSON`` and
rendered as pretty-printed JSON by the formatter.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


class NotionObject(BaseModel):
    """Common base: every Notion object carries ``object`` and ``id``."""

    model_config = ConfigDict(extra="allow")

    id: str = ""


class NotionUser(NotionObject):
    object: Literal["user"]
    type: Optional[str] = None
    name: Optional[str] = None
    avatar_url: Optional[str] = None
    person: Optional[Dict[str, Any]] = None
    bot: Optional[Dict[str, Any]] = None

    @property
    def email(self) -> Optional[str]:
        return (self.person or {}).get("email")


class NotionPage(NotionObject):
    object: Literal["page"]
    properties: Dict[str, Any] = Field(default_factory=dict)
    icon: Optional[Dict[str, Any]] = None
    url: Optional[str] = None

    def title_rich_text(self) -> List[Dict[str, Any]]:
        """Rich text of the page's title-typed property."""
        for prop in self.properties.values():
            if isinstance(prop, dict) and prop.get("type") == "title":
                return prop.get("title") or []
        return []


class NotionDatabase(NotionObject):
    object: Literal["database"]
    title: List[Dict[str, Any]] = Field(default_factory=list)
    icon: Optional[Dict[str, Any]] = None
    url: Optional[str] = None


class NotionBlock(NotionObject):
    object: Literal["block"]
    type: str
    has_children: bool = False

    @property
    def content(self) -> Dict[str, Any]:
        """Type-specific payload, e.g. ``block["paragraph"]``."""
        value = (self.model_extra or {}).get(self.type)
        return value if isinstance(value, dict) else {}


class NotionList(NotionObject):
    object: Literal["list"]
    results: List[Any] = Field(default_factory=list)
    next_cursor: Optional[str] = None
    has_more: bool = False


class OpaqueJSON(BaseModel):
    """Fallback variant: any JSON value that matched no known shape."""

    value: Any = None


NotionResponse = Annotated[
    Union[NotionUser, NotionPage, NotionDatabase, NotionBlock, NotionList],
    Field(discriminator="object"),
]

_response_adapter: TypeAdapter = TypeAdapter(NotionResponse)


def decode_response(
    value: Any,
) -> Union[NotionUser, NotionPage, NotionDatabase, NotionBlock, NotionList, OpaqueJSON]:
    """Decode a raw JSON value into its Notion variant, or ``OpaqueJSON``."""
    if not isinstance(value, dict):
        return OpaqueJSON(value=value)
    try:
        return _response_adapter.validate_python(value)
    except ValidationError:
        return OpaqueJSON(value=value)
