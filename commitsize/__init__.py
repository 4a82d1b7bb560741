"""Report the approximate storage volume added by recent git commits."""

__version__ = '0.1.0'
