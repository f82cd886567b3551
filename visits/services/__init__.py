"""Farm visit service layer."""
