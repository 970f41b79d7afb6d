"""Domain layer: library extraction and export rendering."""
