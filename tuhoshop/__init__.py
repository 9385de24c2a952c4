"""TUHOTUHO storefront backend: cart, checkout, order intake and admin notifications."""

__version__ = "1.0.0"
