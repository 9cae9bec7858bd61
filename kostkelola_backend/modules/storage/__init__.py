"""Image uploads for property and room photos."""
