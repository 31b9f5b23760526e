"""Tests for wadeploy."""
