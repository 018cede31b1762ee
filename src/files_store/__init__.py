"""Files Store: an HTTP service for storing files in GridFS with owner metadata."""

__version__ = "0.1.0"
