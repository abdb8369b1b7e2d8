"""Application layer: use case orchestration over the store and embedders."""
