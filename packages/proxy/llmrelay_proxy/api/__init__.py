"""API routes for the LLM Relay proxy."""
