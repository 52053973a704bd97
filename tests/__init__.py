"""dualserve test suite."""
