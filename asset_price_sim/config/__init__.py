"""Configuration file loading."""
