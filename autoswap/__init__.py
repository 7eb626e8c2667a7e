"""
AutoSwap - Scheduled DEX swap automation.

Approves the router once, then walks every allow-listed trading pair
with bounded retries and balance recovery, cycle after cycle.
"""

__version__ = "0.1.0"
