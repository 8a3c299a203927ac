"""
Boundary layer for external system integrations.

Handles interactions with external systems (vector stores, web pages).
Provides adapters and clients for infrastructure dependencies.
"""
