"""
Typed identifiers and reference resolution.

Primary keys are `uuid.UUID`. Cross-collection references are plain strings
in the stored documents, so they get their own wrapper types to keep them
apart from primary keys:

- `UserRef`        : `messages.user`, the stringified id of a `users` row
- `MessageRef`     : an entry of `conversations.messages`
- `ConversationKey`: the `conversationId` correlation key shared by
                      conversations and messages

`parse_object_id` is the single place where a wire string becomes a primary
key; malformed input raises `InvalidIdentifierError` (a 400-class error).
"""

import logging
import uuid
from typing import Dict, Iterable, List, NewType, Optional, Set, Tuple

from visakha_backend.database.core.errors import InvalidIdentifierError

logger = logging.getLogger(__name__)

UserRef = NewType("UserRef", str)
MessageRef = NewType("MessageRef", str)
ConversationKey = NewType("ConversationKey", str)


def parse_object_id(value, field: str = "id") -> uuid.UUID:
    """Convert a wire identifier to a primary key or raise `InvalidIdentifierError`."""
    if isinstance(value, uuid.UUID):
        return value
    if not isinstance(value, str) or not value.strip():
        raise InvalidIdentifierError(field, value)
    try:
        return uuid.UUID(value.strip())
    except ValueError:
        raise InvalidIdentifierError(field, value) from None


def try_parse_object_id(value) -> Optional[uuid.UUID]:
    try:
        return parse_object_id(value)
    except InvalidIdentifierError:
        return None


def partition_refs(refs: Iterable[str]) -> Tuple[Dict[uuid.UUID, str], Set[str]]:
    """
    Split string references into parseable keys and malformed leftovers.

    Returns
    -------
    (parsed, malformed)
        `parsed` maps each primary key back to the original ref string;
        `malformed` holds refs that can never resolve.
    """
    parsed: Dict[uuid.UUID, str] = {}
    malformed: Set[str] = set()
    for ref in refs:
        if ref is None:
            continue
        key = try_parse_object_id(ref)
        if key is None:
            malformed.add(ref)
        else:
            parsed[key] = ref
    return parsed, malformed


def report_missing(kind: str, owner: str, missing: List[str]) -> None:
    if missing:
        logger.warning("Unresolved %s references in %s: %s", kind, owner, ", ".join(sorted(map(str, missing))))
