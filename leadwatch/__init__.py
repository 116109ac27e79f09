# Lead inactivity detection & escalation engine

__version__ = "1.0.0"
