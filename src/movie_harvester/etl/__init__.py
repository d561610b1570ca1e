"""Harvest ETL package: extractors, loaders and the concurrent pipeline."""
