"""Streaming tool-orchestration relay between the client and the completion backend."""
