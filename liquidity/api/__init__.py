"""HTTP surface for the pool orchestrator."""
