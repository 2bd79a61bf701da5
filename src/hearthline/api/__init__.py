"""HTTP API layer for Hearthline."""
