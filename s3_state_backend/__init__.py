"""Configuration surface of the S3 remote state backend."""

__version__ = "0.1.0"
