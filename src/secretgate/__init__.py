"""SecretGate: block commits that stage secrets."""

__version__ = "0.1.0"
