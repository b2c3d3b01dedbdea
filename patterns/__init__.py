"""Reusable persistence patterns shared by the bookstore repositories."""
