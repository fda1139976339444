"""Configuration settings for the Flask application and game balance."""
import os
from dotenv import load_dotenv

load_dotenv()

class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        os.environ.get('SQLALCHEMY_DATABASE_URI') or \
        'sqlite:///cosmic_paperclip.db'  # Use SQLite for development

    # Host loop
    MAX_TICK_SECONDS = 0.25  # cap on dt per frame (bounds catch-up after suspension)
    AUTOSAVE_INTERVAL_SECONDS = 4.0

    # Persistence keys
    SAVE_KEY_V1 = 'cosmic-paperclip:save:v1'
    SAVE_KEY_V2 = 'cosmic-paperclip:save:v2'
    SAVE_VERSION = 2

    # News log
    NEWS_LIMIT = 32

    # Unit costs: price = round(base * growth ** owned)
    AUTO_CLIPPER_BASE_COST = 15
    AUTO_CLIPPER_COST_GROWTH = 1.15
    MEGA_CLIPPER_BASE_COST = 500
    MEGA_CLIPPER_COST_GROWTH = 1.22
    WIRE_HARVESTER_BASE_COST = 100
    WIRE_HARVESTER_COST_GROWTH = 1.18

    # Flat-price purchases
    PROBE_DESIGN_COST = 100_000  # clips
    WIRE_PURCHASE_COST = 100  # clips
    WIRE_PURCHASE_AMOUNT = 1_000  # wire

    # Production rates (per second, before speed multiplier)
    WIRE_PER_SECOND_BASE = 1.2
    WIRE_PER_SECOND_PER_AUTO_CLIPPER = 0.15
    WIRE_PER_SECOND_PER_HARVESTER = 2.5
    CLIPS_PER_SECOND_PER_AUTO_CLIPPER = 0.5
    CLIPS_PER_SECOND_PER_MEGA_CLIPPER = 6
    PROBE_REPLICATION_PER_SECOND = 0.0022

    # Trust upgrades
    SPEED_UPGRADE_FACTOR = 1.25  # speed grows
    EFFICIENCY_UPGRADE_FACTOR = 0.9  # wire-per-clip shrinks

    # Default probe split (replicate, harvest, manufacture)
    DEFAULT_ALLOCATION = (34, 33, 33)

class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True

class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False

class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'

config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
