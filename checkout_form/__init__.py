"""Checkout form core: schema validation and single in-flight purchase submission."""
