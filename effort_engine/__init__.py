"""Effort Score pace derivation and workout execution adherence scoring."""
