"""polygen - orchestration layer for multi-language source generation."""

__version__ = "0.1.0"
