"""Google Cloud Storage drive with a pluggable drive registry."""

__version__ = "0.1.0"
