"""
Restaurant POS API

Backend for the waiter, kitchen and billing screens of a restaurant:
table occupancy, order intake, kitchen queue and the billing ledger.
"""

__version__ = "1.0.0"
