"""Chain orchestration: lazy generation, crossings and pickups."""
