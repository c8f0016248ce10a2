"""Domain layer: reconciliation core and the ports it consumes."""
