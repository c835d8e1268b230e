"""
Core of the chat client: configuration, the exchange state machine and the
controller that executes its effects.
"""
