"""cafe-cli: a text menu front end for a café ordering database"""

__version__ = "1.0.0"
