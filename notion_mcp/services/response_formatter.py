# Response Formatter Service
"""
Render wrapped-API responses as compact text.

The raw JSON value is first decoded into one of the Notion variants in
``notion_mcp.models.notion``; rendering then dispatches on the variant type.
Values that decode to nothing recognizable come back as indented JSON.
"""

import json
import logging
from typing import Any, Optional

from notion_mcp.models.notion import (
    NotionBlock,
    NotionDatabase,
    NotionList,
    NotionPage,
    NotionUser,
    decode_response,
)
from notion_mcp.services.block_formatter import DATABASE_ICON, PAGE_ICON, BlockFormatter
from notion_mcp.services.rich_text import reference_tag, rich_text_to_plain

logger = logging.getLogger("notion_mcp.services.response_formatter")

USER_ICON = "👤"
BOT_ICON = "🤖"


def to_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def format_user(user: NotionUser) -> str:
    icon = BOT_ICON if user.type == "bot" else USER_ICON
    line = f"{icon} {user.name or 'Unknown user'} {reference_tag('user', user.id)}"
    if user.email:
        line += f" ({user.email})"
    return line


def format_page(page: NotionPage) -> str:
    title = rich_text_to_plain(page.title_rich_text()) or "Untitled"
    return f"{PAGE_ICON} {title} {reference_tag('page', page.id)}"


def format_database(database: NotionDatabase) -> str:
    title = rich_text_to_plain(database.title) or "Untitled"
    return f"{DATABASE_ICON} {title} {reference_tag('db', database.id)}"


class ResponseFormatter:
    """Formats one response at a time; owns the block formatter's counters."""

    def __init__(self):
        self.block_formatter = BlockFormatter()

    def format_response(self, operation_id: str, data: Any) -> str:
        """
        Render a successful response body.

        Args:
            operation_id: Operation that produced the body
            data: Parsed response body

        Returns:
            Readable text, or indented JSON for unrecognized shapes
        """
        self.block_formatter.reset_numbered_list_counters()
        try:
            rendered = self._render(decode_response(data))
        except Exception as e:
            logger.warning(f"Failed to render {operation_id} response: {e}")
            rendered = None

        if rendered is None:
            logger.debug(f"No text rendering for {operation_id} response; using JSON")
            return to_json(data)
        return rendered

    def _render(self, decoded: Any) -> Optional[str]:
        if isinstance(decoded, NotionUser):
            return format_user(decoded)
        if isinstance(decoded, NotionBlock):
            return self.block_formatter.format_block(decoded)
        if isinstance(decoded, NotionList):
            return self._format_list(decoded)
        return None

    def _format_list(self, envelope: NotionList) -> Optional[str]:
        items = [decode_response(item) for item in envelope.results]

        if not items:
            lines = ["Found 0 result(s)"]
        elif all(isinstance(item, NotionUser) for item in items):
            lines = [f"Found {len(items)} user(s)"]
            lines.extend(format_user(item) for item in items)
        elif all(isinstance(item, NotionBlock) for item in items):
            lines = [self.block_formatter.format_blocks(items)]
        elif all(isinstance(item, (NotionPage, NotionDatabase)) for item in items):
            lines = [f"Found {len(items)} result(s)"]
            lines.extend(
                format_page(item) if isinstance(item, NotionPage) else format_database(item)
                for item in items
            )
        else:
            return None

        if envelope.has_more:
            lines.append(f"More results available (next_cursor: {envelope.next_cursor})")
        return "\n".join(lines)


def format_response(operation_id: str, data: Any) -> str:
    """Render a response body with a fresh formatter."""
    return ResponseFormatter().format_response(operation_id, data)
