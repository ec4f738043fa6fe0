"""
hookd - a webhook daemon that runs preconfigured commands ("hooks").

A launch request starts a hook in the background and returns an instance
id immediately.  The instance's status record and its stdout/stderr logs
are persisted under a sharded data directory and can be read at any time,
including byte ranges of logs that are still being written.

Packages:
    - ``hookd.core``: errors, logging, configuration, models
    - ``hookd.execution``: launcher, supervisor, log and status readers
    - ``hookd.api``: FastAPI transport
    - ``hookd.cli``: typer command line
"""

__version__ = "0.3.0"
