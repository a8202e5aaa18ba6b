"""hexpaint: paint selections on an H3 grid overlaid on a map viewport."""

__version__ = "0.1.0"
