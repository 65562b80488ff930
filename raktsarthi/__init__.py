"""RaktSarthi blood-donation coordination API."""
