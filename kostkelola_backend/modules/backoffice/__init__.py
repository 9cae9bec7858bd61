"""Platform administration for support and admin staff."""
