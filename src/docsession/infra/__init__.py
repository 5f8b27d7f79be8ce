"""Infraestrutura: crypto do token, stores e transportes."""
