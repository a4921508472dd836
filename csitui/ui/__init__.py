"""Terminal UI for csitui."""
