"""Catalog search core: field extraction, expansion, matching and display."""
