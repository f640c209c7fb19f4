"""HTTP surface of the Waggle match service."""
