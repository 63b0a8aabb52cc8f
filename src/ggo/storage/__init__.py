"""Persistence layer for ggo: schema, engine, migrations and repositories."""
