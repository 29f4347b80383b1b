"""A small terminal arcade game about collecting apples against the clock."""

__version__ = "0.1.0"
__all__ = ["engine", "game"]