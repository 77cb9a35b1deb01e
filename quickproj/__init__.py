"""quickproj — fast project launcher: find project roots and open them in an editor."""

__version__ = "0.1.0"
