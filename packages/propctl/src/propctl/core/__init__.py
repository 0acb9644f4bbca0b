"""Core runtime helpers shared by propctl commands."""
