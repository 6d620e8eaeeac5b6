"""
Constants for the form builder guardrails and validation rules.

This module contains all patterns and message templates used when checking
schemas and user input. Centralizing these makes them easier to
maintain and update.
"""

import re

# local@domain.tld
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Minimum length enforced by the password rule
PASSWORD_MIN_LENGTH = 8

# Field ids usable as formula identifiers
VALID_FIELD_ID = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")

# User-facing validation messages
REQUIRED_MESSAGE = "This field is required"
MIN_LENGTH_MESSAGE = "Minimum length is {n} characters"
MAX_LENGTH_MESSAGE = "Maximum length is {n} characters"
EMAIL_MESSAGE = "Please enter a valid email address"
PASSWORD_MESSAGE = "Password must be at least {n} characters long"

# Leading integer of a rule threshold ("5", " 12px")
THRESHOLD_PATTERN = re.compile(r"^\s*([+-]?\d+)")
