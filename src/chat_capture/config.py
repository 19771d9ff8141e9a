# Copyright (C) 2025 Torsten Knodt and contributors
# GNU General Public License
# SPDX-License-Identifier: GPL-3.0-or-later

"""Central configuration constants."""

import os

# Seconds to wait after expanding collapsed thoughts so the page can render them
THOUGHT_SETTLE_DELAY = float(os.environ.get("CHAT_CAPTURE_THOUGHT_SETTLE_DELAY", "1.0"))

# Persistence bridge limits (bytes of UTF-8 JSON)
MAX_SESSION_BYTES = int(os.environ.get("CHAT_CAPTURE_MAX_SESSION_BYTES", "5000000"))
WARN_SESSION_BYTES = int(os.environ.get("CHAT_CAPTURE_WARN_SESSION_BYTES", "4000000"))

# Titles
TITLE_MAX_LENGTH = int(os.environ.get("CHAT_CAPTURE_TITLE_MAX_LENGTH", "100"))
FALLBACK_TITLE_PROMPT_LENGTH = 50

# Session defaults
DEFAULT_SESSION_NAME = "Untitled Chat"
DEFAULT_CHAT_TITLE = "AI Chat Export"
DEFAULT_USER_NAME = "User"
DEFAULT_AI_NAME = "AI"
DEFAULT_AUTHOR = "User"
IMPORT_TYPE = "extension"
