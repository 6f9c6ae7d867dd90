"""Adapters connecting the claims engine to storage backends."""
