"""Shared plumbing: logging, errors and the HTTP service base."""
