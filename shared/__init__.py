"""
Shared Kernel

Domain events, value objects and errors, the unit of work and the message
bus used by every lifecycle app.
"""
