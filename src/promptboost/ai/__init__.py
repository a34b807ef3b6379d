"""Vendor model discovery and streaming chat clients."""
