"""Core backend infrastructure for the replay reconstruction service.

This package contains configuration, logging, database, and dependency helpers
used by the FastAPI application entrypoint and the command line tools.
"""
