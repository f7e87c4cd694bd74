"""Report writer adapters for persisting the discovery and execution documents."""
