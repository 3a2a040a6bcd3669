"""Translator service client."""
