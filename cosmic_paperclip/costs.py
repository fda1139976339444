"""Unit pricing: exponential cost curves over the number already owned."""
from cosmic_paperclip.config import Config
from cosmic_paperclip.numbers import BigNum


def exponential_cost(base, growth, owned):
    """price = round(base * growth ** owned)"""
    return BigNum(growth).pow(int(owned)).times(base).round()


def auto_clipper_cost(owned):
    return exponential_cost(Config.AUTO_CLIPPER_BASE_COST, Config.AUTO_CLIPPER_COST_GROWTH, owned)


def mega_clipper_cost(owned):
    return exponential_cost(Config.MEGA_CLIPPER_BASE_COST, Config.MEGA_CLIPPER_COST_GROWTH, owned)


def wire_harvester_cost(owned):
    return exponential_cost(Config.WIRE_HARVESTER_BASE_COST, Config.WIRE_HARVESTER_COST_GROWTH, owned)


def can_afford(clips, price):
    """A purchase is legal iff clips >= price."""
    return BigNum.coerce(clips).gte(price)
