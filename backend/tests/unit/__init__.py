"""
Unit Tests

Unit tests run in isolation without external dependencies.
The database session and the LLM client are mocked.
"""
