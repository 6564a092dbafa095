"""Touch-style timestamp utility."""
