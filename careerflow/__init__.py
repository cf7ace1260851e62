"""Careerflow - resume builder, ATS checker and PDF exporter."""

__version__ = "0.1.0"
