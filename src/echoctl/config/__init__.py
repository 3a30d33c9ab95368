"""Configuration: TOML discovery, layered settings, logging setup."""
