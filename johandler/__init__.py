"""Client, order, fee and payment records on SQLite, with schema migrations."""

__version__ = "0.1.0"
__all__ = ["__version__"]