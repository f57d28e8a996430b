"""nextver - derive the next release version from git tags."""

__version__ = "0.3.0"
