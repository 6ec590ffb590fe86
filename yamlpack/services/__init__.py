"""Packaging services: compile, locate, bundle, release."""
