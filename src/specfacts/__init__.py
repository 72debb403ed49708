"""specfacts - typed extraction of WebIDL and CSS grammar facts from specs."""

__version__ = "0.1.0"
