"""quotebook - a personal quote collection library with a terminal front end."""

__version__ = "0.1.0"
