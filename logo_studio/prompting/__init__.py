"""Instruction templates and provider payload assembly."""
