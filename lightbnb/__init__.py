"""
LightBnB data-access layer.
Parameterised queries for users, properties and reservations.
"""

__version__ = "1.0.0"
