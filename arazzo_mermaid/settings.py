"""Runtime settings for arazzo-mermaid.

All values read from environment variables (a local .env file is loaded first)
with defaults matching the command line defaults. Command line flags override
these values.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _str(key: str, default: str) -> str:
    return os.getenv(key, default)


# =====================================================================
# Rendering
# =====================================================================

# "qualified" prefixes step node names with their workflow id, "bare" does not
NODE_NAMING = _str("ARAZZO_MERMAID_NODE_NAMING", "qualified")


# =====================================================================
# Hosted viewer (mermaid.live)
# =====================================================================

LIVE_EDITOR_URL = _str("ARAZZO_MERMAID_LIVE_EDITOR_URL", "https://mermaid.live/edit")
LIVE_EDITOR_THEME = _str("ARAZZO_MERMAID_LIVE_EDITOR_THEME", "default")


# =====================================================================
# Logging
# =====================================================================

LOG_LEVEL = _str("ARAZZO_MERMAID_LOG_LEVEL", "WARNING")

# Empty means no file handler
LOG_FILE = _str("ARAZZO_MERMAID_LOG_FILE", "")
