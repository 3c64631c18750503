"""PropertyVue: property catalog, filtering and favorites."""

__version__ = "0.1.0"
