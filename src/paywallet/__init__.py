"""
paywallet - HD wallet derivation and payment computation for Ethereum-style chains.
"""

__version__ = "0.1.0"
