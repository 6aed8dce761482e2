"""Domain layer: track resolution, harmony and playlist ordering."""
