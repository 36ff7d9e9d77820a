"""HRMS backend."""
