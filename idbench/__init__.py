"""Document-store lookup latency benchmark: ObjectId vs UUID keys."""

__version__ = "0.1.0"
