"""Nutrient registry, package sizes and cooking retention."""
