# Block Formatter
"""Render Notion blocks as compact markdown lines tagged with their block id."""

from typing import Any, Callable, Dict, List, Union

from notion_mcp.models.notion import NotionBlock
from notion_mcp.services.rich_text import reference_tag, rich_text_to_markdown

BlockLike = Union[NotionBlock, Dict[str, Any]]

CALLOUT_DEFAULT_ICON = "💡"
TOGGLE_MARKER = "▸"
PAGE_ICON = "📄"
DATABASE_ICON = "🗂"


def as_block(block: BlockLike) -> NotionBlock:
    if isinstance(block, NotionBlock):
        return block
    return NotionBlock.model_validate({"object": "block", **block})


class BlockFormatter:
    """
    Formats blocks one at a time.

    Numbered list items are counted per indentation level. The counters live
    on the instance; call ``reset_numbered_list_counters`` before starting an
    unrelated render.
    """

    def __init__(self):
        self._numbered_list_counters: Dict[int, int] = {}
        self._renderers: Dict[str, Callable[[NotionBlock, str, str, int], str]] = {
            "paragraph": self._paragraph,
            "heading_1": self._heading,
            "heading_2": self._heading,
            "heading_3": self._heading,
            "bulleted_list_item": self._bulleted_list_item,
            "numbered_list_item": self._numbered_list_item,
            "to_do": self._to_do,
            "code": self._code,
            "quote": self._quote,
            "callout": self._callout,
            "toggle": self._toggle,
            "divider": self._divider,
            "table": self._table,
            "table_row": self._table_row,
            "child_page": self._child_page,
            "child_database": self._child_database,
        }

    def format_block(self, block: BlockLike, indent_level: int = 0) -> str:
        block = as_block(block)
        indent = "  " * indent_level
        tag = reference_tag("block", block.id)
        renderer = self._renderers.get(block.type)
        if renderer is None:
            return f"{indent}[{block.type}] {tag}"
        return renderer(block, tag, indent, indent_level)

    def format_blocks(self, blocks: List[BlockLike], indent_level: int = 0) -> str:
        return "\n".join(self.format_block(block, indent_level) for block in blocks)

    def reset_numbered_list_counters(self) -> None:
        self._numbered_list_counters.clear()

    # ------------------------------------------------------------------
    # Per-type renderers
    # ------------------------------------------------------------------

    @staticmethod
    def _text(block: NotionBlock) -> str:
        return rich_text_to_markdown(block.content.get("rich_text"))

    def _paragraph(self, block, tag, indent, level):
        text = self._text(block)
        if not text.strip():
            return ""
        return f"{indent}{text} {tag}"

    def _heading(self, block, tag, indent, level):
        hashes = "#" * int(block.type[-1])
        if "rich_text" not in block.content:
            return f"{hashes} [Heading] {tag}"
        return f"{hashes} {self._text(block)} {tag}"

    def _bulleted_list_item(self, block, tag, indent, level):
        return f"{indent}- {self._text(block)} {tag}"

    def _numbered_list_item(self, block, tag, indent, level):
        number = self._numbered_list_counters.get(level, 1)
        self._numbered_list_counters[level] = number + 1
        return f"{indent}{number}. {self._text(block)} {tag}"

    def _to_do(self, block, tag, indent, level):
        checkbox = "[x]" if block.content.get("checked") else "[ ]"
        return f"{indent}- {checkbox} {self._text(block)} {tag}"

    def _code(self, block, tag, indent, level):
        language = block.content.get("language") or ""
        caption = block.content.get("caption")
        rendered = f"```{language}\n{self._text(block)}\n``` {tag}"
        if caption:
            rendered += f"\n*{rich_text_to_markdown(caption)}*"
        return rendered

    def _quote(self, block, tag, indent, level):
        lines = self._text(block).split("\n")
        return "\n".join(f"> {line}" for line in lines) + f" {tag}"

    def _callout(self, block, tag, indent, level):
        icon = block.content.get("icon")
        emoji = icon.get("emoji") if isinstance(icon, dict) else None
        icon = emoji or CALLOUT_DEFAULT_ICON
        return f"> {icon} {self._text(block)} {tag}"

    def _toggle(self, block, tag, indent, level):
        return f"{indent}{TOGGLE_MARKER} {self._text(block)} {tag}"

    def _divider(self, block, tag, indent, level):
        return "---"

    def _table(self, block, tag, indent, level):
        return f"[Table: {block.content.get('table_width', 0)} columns] {tag}"

    def _table_row(self, block, tag, indent, level):
        cells = [rich_text_to_markdown(cell) for cell in block.content.get("cells") or []]
        return f"| {' | '.join(cells)} |"

    def _child_page(self, block, tag, indent, level):
        return f"{indent}{PAGE_ICON} {block.content.get('title', '')} {tag}"

    def _child_database(self, block, tag, indent, level):
        return f"{indent}{DATABASE_ICON} {block.content.get('title', '')} {tag}"
