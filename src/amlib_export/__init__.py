"""amlib-export - Export data from the Apple Music library to CSV."""

__version__ = "0.3.0"
