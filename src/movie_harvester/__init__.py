"""Bulk TMDB movie harvester.

Fetches movie records from the TMDB API with a bounded, rate-limited worker
pool, normalizes them into a fixed schema and writes them to JSON batch
files.
"""

__version__ = "1.0.0"
