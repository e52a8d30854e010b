"""uri-spine command-line interface."""
