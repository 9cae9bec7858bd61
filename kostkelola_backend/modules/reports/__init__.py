"""Property statistics and financial reports."""
