"""csspurge command line interface."""
