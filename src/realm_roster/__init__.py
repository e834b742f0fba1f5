"""Realm roster: characters, realm-scoped traits and 1-20 ratings."""
__version__ = "0.1.0"
