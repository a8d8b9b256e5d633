"""Password-based AES encryption of files and folders in an authenticated container."""

__version__ = "1.0.0"
__all__ = ["__version__"]