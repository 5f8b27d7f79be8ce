"""Configuração do docsession: settings e logging."""
