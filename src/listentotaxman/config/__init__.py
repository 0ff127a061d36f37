"""Loading and validation of the user configuration file."""
