"""Client library for the EasyPost shipping API: models, event decoding, HTTP transport and client."""

__version__ = "2.0.0"