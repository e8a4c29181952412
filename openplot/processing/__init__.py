"""Processing components for derived channels."""
