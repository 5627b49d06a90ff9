"""Protocol core: wire format, telemetry decoding and the control session."""
