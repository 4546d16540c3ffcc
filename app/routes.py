"""Registro de rotas: caminho de entrada -> chaves de filtro.

Montado uma única vez na inicialização a partir de URL_PATH e das variáveis
<ROTA>_FILTER_KEY; depois disso é somente leitura e pode ser compartilhado
entre requisições concorrentes sem lock.
"""
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterable, Optional, Tuple

from .constants import FILTER_KEY_SUFFIX, HEARTCHECK_PATH, RESPONSE_TEXTS, URL_PATH, WEBHOOK_PATH
from .filters import parse_filter_keys

logger = logging.getLogger(__name__)

KIND_DYNAMIC = "dynamic"
KIND_WEBHOOK = "webhook"
KIND_HEARTCHECK = "heartcheck"


class RouteConfigError(ValueError):
    pass


def _route_name(name):
    return name.strip().lstrip("/").strip()


def normalize_route_key(name: str) -> Optional[str]:
    """' orders ' -> '/orders'. Retorna None para nomes vazios."""
    clean = _route_name(name or "")
    if not clean:
        return None
    return "/" + clean


def filter_env_name(name):
    return _route_name(name).upper() + FILTER_KEY_SUFFIX


@dataclass(frozen=True)
class RouteEntry:
    key: str
    filter_keys: Tuple[str, ...] = ()
    kind: str = KIND_DYNAMIC

    @property
    def confirmation(self) -> str:
        return RESPONSE_TEXTS[self.kind]

    @property
    def is_filtered(self) -> bool:
        return bool(self.filter_keys)


class RouteRegistry(Mapping):
    """Mapa imutável RouteKey -> RouteEntry, na ordem de registro."""

    def __init__(self, entries):
        table = {}
        for entry in entries:
            # última definição vence
            table.pop(entry.key, None)
            table[entry.key] = entry
        self._table = MappingProxyType(table)

    def __getitem__(self, key):
        return self._table[key]

    def __iter__(self):
        return iter(self._table)

    def __len__(self):
        return len(self._table)

    def __repr__(self):
        return f"RouteRegistry({list(self._table)!r})"

    def message_routes(self):
        return tuple(e for e in self._table.values() if e.kind != KIND_HEARTCHECK)


def build_route_registry(route_names: Iterable[str], filter_lookup: Callable[[str], Optional[str]]) -> RouteRegistry:
    """
    Monta o registro a partir da lista ordenada de nomes de rota.

    filter_lookup recebe o nome da variável (ex.: 'ORDERS_FILTER_KEY') e devolve
    o valor bruto separado por vírgulas, ou None. As rotas reservadas /webhook e
    /heartcheck entram por último e sem filtro, então sobrescrevem rotas de
    usuário com o mesmo nome.

    Duas rotas diferentes que geram o mesmo nome de variável (ex.: 'orders' e
    'ORDERS') são rejeitadas com RouteConfigError.
    """
    entries = []
    env_owner = {}
    for name in route_names:
        key = normalize_route_key(name)
        if key is None:
            continue
        env_name = filter_env_name(name)
        owner = env_owner.setdefault(env_name, key)
        if owner != key:
            raise RouteConfigError(
                f"Rotas '{owner}' e '{key}' compartilham a variável de filtro {env_name}"
            )
        filter_keys = parse_filter_keys(filter_lookup(env_name))
        entries.append(RouteEntry(key=key, filter_keys=filter_keys, kind=KIND_DYNAMIC))

    for reserved in (WEBHOOK_PATH, HEARTCHECK_PATH):
        if reserved in env_owner.values():
            logger.warning(f"Rota {reserved} é reservada; configuração de usuário ignorada")

    entries.append(RouteEntry(key=WEBHOOK_PATH, kind=KIND_WEBHOOK))
    entries.append(RouteEntry(key=HEARTCHECK_PATH, kind=KIND_HEARTCHECK))
    return RouteRegistry(entries)


def load_route_registry(environ: Optional[Mapping[str, str]] = None) -> RouteRegistry:
    if environ is None:
        route_names = URL_PATH.split(",")
        registry = build_route_registry(route_names, os.getenv)
    else:
        route_names = (environ.get("URL_PATH") or "").split(",")
        registry = build_route_registry(route_names, environ.get)
    for entry in registry.values():
        if entry.kind == KIND_DYNAMIC:
            logger.info(f"Rota registrada: {entry.key} filtros={list(entry.filter_keys) or 'todos'}")
    return registry
