"""Test suite for the customer search API."""
