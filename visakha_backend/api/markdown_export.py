"""
Markdown rendering of feedback conversations for the export download.
"""

from datetime import datetime
from typing import Iterable, Optional

from visakha_backend.api.models import FeedbackConversation, FeedbackMessage

RULE = "---\n\n"


def _format_datetime(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else "unknown"


def _format_time(value: Optional[datetime]) -> str:
    return value.strftime("%H:%M:%S") if value else "unknown"


def render_content(content) -> str:
    if isinstance(content, str):
        return f"{content}\n\n"
    lines = []
    for block in content:
        if not isinstance(block, dict):
            continue
        kind = block.get("type")
        if kind == "text":
            lines.append(f"{block.get('text', '')}\n")
        elif kind == "think":
            lines.append(f"> *Thinking:*\n> {block.get('think', '')}\n")
        elif kind == "tool_call":
            call = block.get("tool_call") or {}
            lines.append(f"> *Tool call:* `{call.get('name', '')}` {call.get('args', '')}\n")
    return "".join(lines) + "\n"


def render_message(message: FeedbackMessage) -> str:
    sender = "👤 **User**" if message.sender == "User" else "🤖 **Model**"
    md = f"{sender} ({_format_time(message.created_at)})\n\n"
    if message.text:
        md += f"{message.text}\n\n"
    if message.content:
        md += render_content(message.content)
    if message.feedback:
        comment = message.feedback.get("text")
        md += f"> **Feedback:** {message.feedback.get('rating')}{' - ' + comment if comment else ''}\n\n"
    return md


def render_conversation(conversation: FeedbackConversation) -> str:
    md = f"## {conversation.title or 'Untitled Conversation'}\n\n"
    md += f"**ID:** {conversation.conversation_id}\n"
    md += f"**Date:** {_format_datetime(conversation.created_at)}\n"
    md += f"**Status:** {'Resolved' if conversation.resolved else 'Open'}\n"
    md += f"\n{RULE}"
    if conversation.messages:
        md += "".join(render_message(message) for message in conversation.messages)
    else:
        md += "*No messages in this conversation.*\n\n"
    md += f"\n{RULE}"
    return md


def render_export(conversations: Iterable[FeedbackConversation], generated_at: datetime) -> str:
    """Full export document: header, then one section per conversation."""
    conversations = list(conversations)
    md = "# All Conversations Export\n\n"
    md += f"Generated on: {_format_datetime(generated_at)}\n"
    md += f"Total Conversations: {len(conversations)}\n\n"
    md += RULE
    md += "".join(render_conversation(conversation) for conversation in conversations)
    return md
