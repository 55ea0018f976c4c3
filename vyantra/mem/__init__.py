"""vyantra storage: the bounded operand stack."""
