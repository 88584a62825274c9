"""Build radar rules, maintainer listings and the routes dump from the route registry."""

__version__ = "0.1.0"
