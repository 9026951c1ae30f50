"""sprinthealth - sprint health reports for iterative projects."""

__version__ = "0.1.0"
