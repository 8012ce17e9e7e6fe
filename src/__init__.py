"""Queue backend package."""
