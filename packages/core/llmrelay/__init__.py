"""LLM Relay core: request models, errors, settings, logging and the upstream adapter."""
