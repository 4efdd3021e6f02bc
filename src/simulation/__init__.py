"""Stochastic dice pool simulation package."""

from .stochastics import SeedRegistry
from .engine import DiceSimulator

__all__ = ["SeedRegistry", "DiceSimulator"]
