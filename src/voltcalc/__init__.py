"""Battery voltage calculator for electric-scooter packs."""

__version__ = "0.1.0"
