"""Catalog store interface and backends."""
