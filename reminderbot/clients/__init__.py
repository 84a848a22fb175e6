"""Clients for the external systems the bot talks to."""
