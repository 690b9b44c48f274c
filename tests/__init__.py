"""Tests for the ZTE ONU exporter."""
