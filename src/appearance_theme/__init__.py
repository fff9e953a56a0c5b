"""appearance-theme: pick and re-apply themes as the system switches light/dark."""

__version__ = "0.3.0"
