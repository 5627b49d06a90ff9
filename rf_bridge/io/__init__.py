"""Network plumbing for the RealFlight link."""
