"""Image-based movie and performer recognition backed by a vision language model."""

__version__ = "0.1.0"
