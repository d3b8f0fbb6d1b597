"""Domain layer for LLM Relay."""
