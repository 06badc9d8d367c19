"""Exchange adapter framework for the trading bot."""
