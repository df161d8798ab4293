"""Gate package found by convention in loader tests."""
