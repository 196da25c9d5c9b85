"""Read, monitor and discover SDS011 particulate matter sensors."""

__version__ = "1.0.0"