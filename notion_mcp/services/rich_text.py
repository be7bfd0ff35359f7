# Rich Text Renderer
"""Convert Notion rich text arrays to markdown."""

from typing import Any, Dict, List, Optional

# mention type -> reference tag prefix
_MENTION_TAGS = {
    "page": "page",
    "database": "db",
    "user": "user",
}


def reference_tag(kind: str, identifier: str) -> str:
    return f"[{kind}:{identifier}]"


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _apply_annotations(text: str, annotations: Dict[str, Any]) -> str:
    if annotations.get("code"):
        text = f"`{text}`"
    if annotations.get("bold"):
        text = f"**{text}**"
    if annotations.get("italic"):
        text = f"*{text}*"
    if annotations.get("strikethrough"):
        text = f"~~{text}~~"
    if annotations.get("underline"):
        text = f"<u>{text}</u>"
    return text


def _mention_tag(mention: Dict[str, Any]) -> Optional[str]:
    mention_type = mention.get("type")
    target = mention.get(mention_type) if mention_type else None
    if not isinstance(target, dict):
        return None
    if mention_type == "date":
        return reference_tag("date", target["start"]) if target.get("start") else None
    if mention_type in _MENTION_TAGS and target.get("id"):
        return reference_tag(_MENTION_TAGS[mention_type], target["id"])
    return None


def render_rich_text_item(item: Dict[str, Any]) -> str:
    """Render one rich text run with its annotations, link or mention tag."""
    item_type = item.get("type", "text")

    if item_type == "equation":
        expression = _as_dict(item.get("equation")).get("expression") or item.get("plain_text", "")
        return f"${expression}$"

    if item_type == "mention":
        text = item.get("plain_text")
        if not isinstance(text, str):
            text = ""
        tag = _mention_tag(_as_dict(item.get("mention")))
        return f"{text} {tag}" if tag else text

    text_obj = _as_dict(item.get("text"))
    text = item.get("plain_text")
    if text is None:
        text = text_obj.get("content", "")
    if not text or not isinstance(text, str):
        return ""

    text = _apply_annotations(text, _as_dict(item.get("annotations")))

    link = text_obj.get("link")
    url = link.get("url") if isinstance(link, dict) else None
    url = url or item.get("href")
    if url:
        text = f"[{text}]({url})"
    return text


def rich_text_to_markdown(rich_text: Optional[List[Any]]) -> str:
    """Concatenate the rendered runs of a rich text array."""
    if not isinstance(rich_text, list):
        return ""
    return "".join(render_rich_text_item(item) for item in rich_text if isinstance(item, dict))


def rich_text_to_plain(rich_text: Optional[List[Any]]) -> str:
    """Plain text of a rich text array, without markup."""
    if not isinstance(rich_text, list):
        return ""
    parts = []
    for item in rich_text:
        if not isinstance(item, dict):
            continue
        text = item.get("plain_text")
        if text is None:
            text = _as_dict(item.get("text")).get("content", "")
        if isinstance(text, str):
            parts.append(text)
    return "".join(parts)
