"""salesrecon: reconcile two origin sales reports into one product series."""

__version__ = "0.1.0"
