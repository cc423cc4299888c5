"""Body metric formulas and goal planning."""
