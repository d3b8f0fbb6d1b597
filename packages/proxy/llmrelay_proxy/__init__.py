"""FastAPI service that relays chat-completion requests to OpenRouter."""
