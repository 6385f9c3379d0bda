"""Test package for optionpages."""
