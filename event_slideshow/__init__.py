"""Event photo slideshow backed by a remote media store."""
