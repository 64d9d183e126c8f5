"""Kafka record decoding, schema registry access and a search query parser."""

__version__ = "0.0.10"