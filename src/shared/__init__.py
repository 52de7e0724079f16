"""Constants shared by the service, scripts and tests."""
