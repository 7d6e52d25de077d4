"""Chart rendering for expression trees."""

__version__ = "0.1.0"
