"""
Command line interface for hookd (typer).

    hookd serve        start the HTTP daemon
    hookd hooks        list configured hooks
    hookd status ID    show a status record
    hookd logs ID      print a log, optionally a byte range
    hookd run NAME     run a hook in the foreground
"""

from hookd.cli.app import app

__all__ = ["app"]
