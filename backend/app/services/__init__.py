"""Services package for learning logic and LLM access."""
