"""fastfilter: faceted product search with a versioned result cache."""

__version__ = "0.1.0"
