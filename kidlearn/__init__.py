"""kidlearn - adaptive difficulty engine for neurodivergent learners."""

__version__ = "1.0.0"
