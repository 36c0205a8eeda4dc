"""Per-run game state."""
