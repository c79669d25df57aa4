"""Application layer - search and matching services."""
