"""Command-line helpers for synthesizing, deploying and inspecting the stack."""
