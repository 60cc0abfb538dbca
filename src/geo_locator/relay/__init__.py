"""Credential-holding relay between clients and the model backend."""
