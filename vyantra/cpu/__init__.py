"""vyantra CPU side: register file, ALU, operand paths."""
