"""
Adapter implementations for the Transit Scheduler.

Adapters are concrete implementations of the port interfaces.
They handle the specifics of each storage backend.
"""
