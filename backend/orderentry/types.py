"""
Value types shared by the store and the query layer.
"""

from enum import Enum


class OrderStatus(str, Enum):
    """Status filter for order queries."""

    ANY = 'any'                  # everything, voided included
    ACTIVE = 'active'            # activated, not voided, not discontinued as of the check date
    NOTVOIDED = 'notvoided'
    COMPLETE = 'complete'        # discontinued as of now
