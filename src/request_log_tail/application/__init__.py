"""Application layer: ports and use cases of the tailing pipeline."""
