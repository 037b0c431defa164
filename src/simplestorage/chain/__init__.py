"""
Chain - On-chain interaction layer for Simple Storage.

Provides the ABI codec and an async JSON-RPC client for Avalanche
C-Chain endpoints.

Uses httpx + eth-abi + eth-hash instead of the heavyweight web3.py.
"""
