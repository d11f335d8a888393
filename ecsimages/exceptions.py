class ImageInventoryError(Exception):
    """Fatal error that aborts the whole inventory run."""
