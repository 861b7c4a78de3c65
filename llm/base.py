"""
Shared pieces of the model invocation boundary.
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class ModelInvocationError(Exception):
    """Raised when the model call fails or returns no usable text."""


def content_to_text(content: Any) -> str:
    """
    Flatten a LangChain message content into plain text.

    Handles both the plain string format and the list-of-parts format
    some providers return.
    """
    if isinstance(content, list):
        text_parts = []
        for part in content:
            if isinstance(part, dict) and "text" in part:
                text_parts.append(part["text"])
            elif isinstance(part, str):
                text_parts.append(part)
        result = "".join(text_parts)
        if not result:
            logger.warning(f"LLM returned empty content from list format: {content}")
        return result

    if not content:
        logger.warning("LLM returned empty string content")
    return str(content) if content else ""
