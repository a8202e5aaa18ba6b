"""Shared utilities for hexpaint."""
