"""Middleware for the LLM Relay proxy."""
