"""Static-site build and output validation."""
