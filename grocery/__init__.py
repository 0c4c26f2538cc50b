"""Grocery product catalog service."""
