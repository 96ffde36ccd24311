"""Service layer: business rules between callers and the stores."""
