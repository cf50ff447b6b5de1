"""Command line interface for stencil."""
