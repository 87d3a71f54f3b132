"""Tests for the Library GraphQL API."""
