"""Hosted backend A (OpenAI Chat Completions)."""
