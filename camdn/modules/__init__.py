"""Feature modules (assets, links)."""
