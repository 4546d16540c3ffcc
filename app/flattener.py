"""Conversão de documentos JSON em texto indentado legível.

Cada chave vira uma linha ``<indent><chave>: `` seguida do valor. Objetos e
listas abrem um novo nível (dois espaços); listas repetem a chave do pai para
cada elemento. A ordem das chaves é a do documento recebido (dict preserva a
ordem de inserção do parser JSON).
"""
from typing import Any, Iterator, Optional

INDENT_UNIT = "  "
DEFAULT_MAX_DEPTH = 64


class TooDeepError(ValueError):
    """Documento com aninhamento acima do limite configurado."""

    def __init__(self, depth, max_depth):
        # depth None: o parser JSON estourou a pilha antes de medir a profundidade
        if depth is None:
            super().__init__(f"JSON nesting exceeds parser recursion limit (limit {max_depth})")
        else:
            super().__init__(f"JSON nesting depth {depth} exceeds limit {max_depth}")
        self.depth = depth
        self.max_depth = max_depth


def format_scalar(value):
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _iter_entry(key, value, level, depth, max_depth):
    if depth > max_depth:
        raise TooDeepError(depth, max_depth)

    yield f"{INDENT_UNIT * level}{key}: "
    if isinstance(value, dict):
        yield "\n"
        for nested_key, nested_value in value.items():
            yield from _iter_entry(str(nested_key), nested_value, level + 1, depth + 1, max_depth)
    elif isinstance(value, list):
        yield "\n"
        # elementos de lista herdam a chave do pai
        for item in value:
            yield from _iter_entry(key, item, level + 1, depth + 1, max_depth)
    else:
        yield format_scalar(value) + "\n"


def _iter_root(value, depth, max_depth):
    if depth > max_depth:
        raise TooDeepError(depth, max_depth)

    if isinstance(value, dict):
        for key, nested_value in value.items():
            yield from _iter_entry(str(key), nested_value, 0, depth, max_depth)
    elif isinstance(value, list):
        # lista na raiz: cada elemento é renderizado como uma raiz
        for item in value:
            yield from _iter_root(item, depth + 1, max_depth)
    else:
        yield format_scalar(value) + "\n"


def iter_flatten(value: Any, max_depth: Optional[int] = None) -> Iterator[str]:
    """Gera o texto em pedaços, percorrendo a árvore em profundidade (pré-ordem).

    Levanta TooDeepError quando o aninhamento passa de ``max_depth``; como o
    gerador é preguiçoso, o erro aparece durante a iteração.
    """
    if max_depth is None:
        max_depth = DEFAULT_MAX_DEPTH
    return _iter_root(value, 0, max_depth)


def flatten(value: Any, max_depth: Optional[int] = None) -> str:
    return "".join(iter_flatten(value, max_depth))
