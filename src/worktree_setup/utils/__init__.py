"""Utility helpers for worktree-setup."""
