"""GovAssist: procedure catalog, chat and AI assistant for Sri Lankan government services."""

__version__ = "0.1.0"
