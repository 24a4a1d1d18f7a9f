"""Application settings and curated watchlists."""
