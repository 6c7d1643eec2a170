"""Flappy Push-up: a body-controlled arcade game and its ranking service."""

__version__ = "0.1.0"
