"""Infrastructure: Redis-backed cache."""
