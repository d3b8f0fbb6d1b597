"""Domain interfaces for LLM Relay."""
