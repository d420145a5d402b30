"""Shared constants."""

# AI response cache
AI_CACHE_PREFIX = "ai:"
AI_CACHE_PATTERN = "ai:*"
AI_CACHE_TTL_SECONDS = 3600
CACHED_MODEL_SUFFIX = " (cached)"

# Orchestrator outcome when nothing is enabled
NO_MODELS_ERROR = "No AI models available"
NO_MODEL_NAME = "none"

# Procedure search
DEFAULT_SEARCH_LIMIT = 10
MAX_SEARCH_LIMIT = 100
GROUNDING_LIMIT = 3
SUGGESTION_SOURCE_LIMIT = 10
MAX_SUGGESTIONS = 5

# Chat
DEFAULT_HISTORY_LIMIT = 50
DEFAULT_SESSIONS_LIMIT = 20
CHAT_PROCESSING_ERROR = "Failed to process message"
MAX_MESSAGE_LENGTH = 2000

CSV_EXPORT_HEADERS = ["Timestamp", "Session ID", "Message", "Response", "Category", "Confidence"]
