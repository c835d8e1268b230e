"""
Assistant chat client: a persistent, single-in-flight chat session against a
request/response assistant service.
"""

__version__ = "0.1.0"
