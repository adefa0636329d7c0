"""codebase-migrator: move code between repositories that hold one project in several forms."""

__version__ = "0.1.0"
