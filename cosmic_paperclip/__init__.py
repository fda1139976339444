"""Cosmic Paperclip: simulation core of an incremental paperclip game."""

__version__ = '0.2.0'
