"""Translation layer: hashing, provider clients, cache store, batch translation."""
