"""Detect IP addresses, update DNS records and WAF lists, and summarise the results."""

__version__ = "0.1.0"
__all__ = ["messages", "signals", "updater"]