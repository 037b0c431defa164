"""
Core - The contract-interaction state machine.

- guard:      which chains accept writes
- reader:     cached read of the stored value
- writer:     input validation and the single in-flight write
- controller: connection and write state, status line, view snapshot
"""
