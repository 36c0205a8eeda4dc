"""Maze generation: sizing, carving, alignment and collectible placement."""
