"""Shared runtime helpers: run context, logging, processes, serialization."""
