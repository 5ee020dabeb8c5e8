"""Broker core: game registry, expiry sweeper and credential gate.

Nothing here imports Flask request state; HTTP routes and the app factory
build these objects and hand them their inputs.
"""
