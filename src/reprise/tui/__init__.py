"""Terminal UI for reprise."""
