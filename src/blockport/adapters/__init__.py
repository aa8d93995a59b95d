"""Converters, codecs and key generators."""
