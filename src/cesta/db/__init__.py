"""SQLite persistence for planned meals, recipes and shopping items."""
