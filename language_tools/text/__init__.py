"""Analyze-text client: synchronous kinds plus summarization and healthcare jobs."""
