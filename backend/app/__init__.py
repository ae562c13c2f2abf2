"""Hotel availability and pricing quote API."""
