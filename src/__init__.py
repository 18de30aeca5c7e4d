"""School signage core."""
