"""Tests for hirevo."""
