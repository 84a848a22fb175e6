"""Slack bot that turns the daily NeedPhotoNoShip reminder email into per-order actions."""

__version__ = "0.1.0"
