"""
Wallet - Session management for Simple Storage.

A wallet provider stands in for the browser-injected wallet: it exposes
accounts, the active chain id, and signs and broadcasts transactions.
The ChainConnector owns the session built on top of it.
"""
