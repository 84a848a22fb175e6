"""Message and button-click handling for the reminder bot."""
