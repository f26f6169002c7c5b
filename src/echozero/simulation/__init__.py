"""Per-tick systems, the simulation engine, and scenario tooling."""
