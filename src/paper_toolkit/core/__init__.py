"""Core input models and boundary validation."""
