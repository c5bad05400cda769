"""ChefInBox: classic recipes from the ingredients you have, scaled to your table."""

__version__ = "0.1.0"
