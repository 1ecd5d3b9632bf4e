"""Wire schemas for API responses: error bodies and list envelopes."""
