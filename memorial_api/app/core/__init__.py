"""Configuration, logging, exceptions and shared primitives."""
