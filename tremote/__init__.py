"""tremote - command line remote for the Transmission download daemon."""

__version__ = "0.1.0"
