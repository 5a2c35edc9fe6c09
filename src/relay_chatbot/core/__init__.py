"""Core error types and resilience patterns."""
