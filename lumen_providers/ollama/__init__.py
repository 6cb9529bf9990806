"""Local backend (Ollama daemon)."""
