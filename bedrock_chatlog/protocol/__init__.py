"""Protocol bridge client and packet parsing."""
