"""Command-line interface for vrsdigest."""
