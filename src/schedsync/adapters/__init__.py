"""Adapters binding the domain ports to concrete feeds and stores."""
