"""Command-line sub-applications for DocMan."""
