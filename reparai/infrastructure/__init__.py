"""Infrastructure: caches, LLM clients and logging."""
