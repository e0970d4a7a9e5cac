"""Procedural level generation for a grid-based dungeon crawler."""
