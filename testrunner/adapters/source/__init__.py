"""Source inspection adapters for locating function declarations."""
