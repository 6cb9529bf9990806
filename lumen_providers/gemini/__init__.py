"""Hosted backend B (Google Gemini)."""
