"""Export domain - CSV and terminal rendering."""
