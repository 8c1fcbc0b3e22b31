"""HTTP API for inquiry complexes."""
