"""Small pure helpers shared across adapters."""
