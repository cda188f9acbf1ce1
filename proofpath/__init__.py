"""Proof-path distiller — dependency-graph distillation of mathematical results."""
