"""shortlink: short, collision-free codes for long URLs."""

__version__ = '1.0.0'
