"""Infrastructure layer for LLM Relay."""
