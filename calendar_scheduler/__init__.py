"""Calendar scheduler: constraint-based time-slot scheduling engine and its API."""
