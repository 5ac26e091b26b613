"""daebot - GitHub webhook bot for the daeuniverse repositories."""

__version__ = "0.1.0"
