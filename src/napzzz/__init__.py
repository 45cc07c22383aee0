"""napzzz: sleep session simulation, scoring, and insights."""

__version__ = "0.1.0"
