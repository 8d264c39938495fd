"""Core infrastructure: configuration, logging, database, locales."""
