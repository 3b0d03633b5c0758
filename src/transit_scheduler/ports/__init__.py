"""
Port interfaces for the Transit Scheduler.

Ports define the abstract interfaces that the application layer uses
to communicate with external systems. This follows the Ports and
Adapters (Hexagonal) architecture pattern.
"""

from src.transit_scheduler.ports.transit_data_store import TransitDataStore

__all__ = ["TransitDataStore"]
