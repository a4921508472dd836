"""Configuration package for csitui."""
