"""Infrastructure constants."""
