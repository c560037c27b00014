"""Priority route planning."""
