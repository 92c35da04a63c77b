"""TwixT rules, a Monte Carlo tree search player, game records, Zobrist pattern tables and a desktop board."""

__version__ = "0.1.0"