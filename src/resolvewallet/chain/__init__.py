"""
Chain interaction layer: JSON-RPC transport, ABI descriptor, contract
gateway and confirmation tracking.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
