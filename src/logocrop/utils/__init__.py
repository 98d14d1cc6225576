"""Shared utilities for logocrop."""
