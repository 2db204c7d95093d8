"""Shared utilities: error hierarchy, structured logging, image byte helpers."""
