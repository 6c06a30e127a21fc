"""Test suite for the fighter data pipeline and API."""
