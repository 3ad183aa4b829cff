"""Adapters for the indexer, node-state service and wallet."""
