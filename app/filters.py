from typing import Any, Dict, Optional, Sequence, Tuple


def parse_filter_keys(raw: Optional[str]) -> Tuple[str, ...]:
    """Converte "order_id, total" em ('order_id', 'total'). Vazio = sem filtro."""
    if not raw:
        return ()
    return tuple(k.strip() for k in raw.split(",") if k.strip())


def select_fields(doc: Dict[str, Any], filter_keys: Sequence[str]) -> Dict[str, Any]:
    """
    Restringe o documento às chaves de topo em filter_keys, na ordem do filtro.
    Chaves ausentes são ignoradas. Sem filtro, devolve o próprio documento.
    Os valores não são copiados; descendentes de uma chave selecionada seguem inteiros.
    """
    if not filter_keys:
        return doc

    selected = {}
    for key in filter_keys:
        if key in doc:
            selected[key] = doc[key]
    return selected


def missing_fields(doc, filter_keys):
    return tuple(k for k in filter_keys if k not in doc)
