"""API blueprints for Cosmic Paperclip."""
from cosmic_paperclip.api.game import game_bp

__all__ = ['game_bp']
