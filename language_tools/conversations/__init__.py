"""Conversational language understanding client."""
