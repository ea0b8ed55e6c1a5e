"""Building blocks for simulating container image pulling across clustered edge servers."""

__version__ = "0.1.0"