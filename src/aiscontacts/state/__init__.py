"""State/store layer.

This package holds the single in-memory history of every vessel's
position reports. All reads and writes of that history go through
:class:`~aiscontacts.state.store.ContactStore`.
"""

from aiscontacts.state.store import ContactStore

__all__ = ["ContactStore"]
