"""Live streaming domain: entity lifecycle, transmission sessions, status."""
