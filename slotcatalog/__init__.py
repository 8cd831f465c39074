"""
slotcatalog - time-slot gated product availability for a quick-commerce storefront.
"""

__version__ = "0.1.0"
