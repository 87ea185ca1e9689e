"""Customer search API."""
