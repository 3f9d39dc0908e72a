"""Financial projection engine for school operating budgets."""

__version__ = "0.1.0"
