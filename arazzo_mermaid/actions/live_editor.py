"""
Hosted viewer integration for rendered diagrams.

Builds mermaid.live "pako" links: the editor state is serialized to JSON,
zlib-compressed and URL-safe base64 encoded after '#pako:'. This is pure
post-processing of the renderer output.
"""

import base64
import json
import logging
import webbrowser
import zlib
from typing import Any, Optional

from arazzo_mermaid import settings

logger = logging.getLogger(__name__)


PAKO_PREFIX = "pako:"


class LiveEditorError(Exception):
    """Raised when a live editor link cannot be decoded."""
    pass


def build_live_editor_state(mermaid: str, theme: Optional[str] = None) -> dict[str, Any]:
    """Editor state in the shape mermaid.live serializes."""
    mermaid_config = json.dumps({"theme": theme or settings.LIVE_EDITOR_THEME}, indent=2)
    return {
        "code": mermaid,
        "mermaid": mermaid_config,
        "autoSync": True,
        "updateDiagram": True,
    }


def build_live_editor_url(
    mermaid: str,
    base_url: Optional[str] = None,
    theme: Optional[str] = None,
) -> str:
    """
    Build a mermaid.live link that opens the given diagram.

    Args:
        mermaid: Rendered Mermaid text
        base_url: Editor URL; defaults to ARAZZO_MERMAID_LIVE_EDITOR_URL
        theme: Mermaid theme; defaults to ARAZZO_MERMAID_LIVE_EDITOR_THEME

    Returns:
        URL of the form <base_url>#pako:<payload>
    """
    state = build_live_editor_state(mermaid, theme)
    compressed = zlib.compress(json.dumps(state).encode("utf-8"), 9)
    payload = base64.urlsafe_b64encode(compressed).decode("ascii")
    return f"{base_url or settings.LIVE_EDITOR_URL}#{PAKO_PREFIX}{payload}"


def decode_live_editor_url(url: str) -> dict[str, Any]:
    """
    Decode the editor state carried by a pako link.

    Raises:
        LiveEditorError: If the URL carries no pako payload or it is corrupt
    """
    _, _, fragment = url.partition("#")
    if not fragment.startswith(PAKO_PREFIX):
        raise LiveEditorError(f"No pako payload in URL: {url}")

    payload = fragment[len(PAKO_PREFIX):]
    payload += "=" * (-len(payload) % 4)
    try:
        raw = zlib.decompress(base64.urlsafe_b64decode(payload))
        return json.loads(raw.decode("utf-8"))
    except (ValueError, zlib.error) as e:
        raise LiveEditorError(f"Corrupt pako payload: {e}") from e


def open_in_live_editor(mermaid: str, base_url: Optional[str] = None) -> str:
    """
    Open the diagram in the hosted editor using the default browser.

    Returns:
        The URL that was opened
    """
    url = build_live_editor_url(mermaid, base_url=base_url)
    if not webbrowser.open(url):
        logger.warning("No browser could be opened; visit the URL manually")
    return url
