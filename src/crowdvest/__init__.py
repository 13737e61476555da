"""Crowdvest - data layer for an investment administration platform."""

__version__ = "0.1.0"
