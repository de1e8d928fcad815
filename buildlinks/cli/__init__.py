"""Command-line front end for buildlinks."""

from buildlinks.cli.main import app

__all__ = ["app"]
