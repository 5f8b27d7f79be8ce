"""Configuração do pytest para o projeto docsession."""

import sys
from pathlib import Path

import pytest

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from docsession.config.settings import (  # noqa: E402
    get_base_settings,
    get_database_settings,
    get_session_settings,
)


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> None:
    """Settings são cacheadas; cada teste lê o ambiente do zero."""
    get_base_settings.cache_clear()
    get_database_settings.cache_clear()
    get_session_settings.cache_clear()
