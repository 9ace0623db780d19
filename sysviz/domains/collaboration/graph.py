"""Примитивы изменения графа, общие для локальных и удалённых правок."""
import copy
import re
import uuid
from typing import Any, Dict, Iterable, List, Union

from sysviz.domains.collaboration.schemas import DiffOp, DiffOpKind

Item = Dict[str, Any]


def apply_changes(changes: Iterable[Union[DiffOp, Item]], items: List[Item]) -> List[Item]:
    """Применение пакета DiffOp по порядку, исходный список не меняется.

    Замена или удаление отсутствующего id ничего не делает. Добавление
    существующего id дописывает ещё один элемент: дубликаты возможны.
    """
    result = list(items)

    for change in changes:
        if not isinstance(change, DiffOp):
            change = DiffOp.model_validate(change)

        if change.op == DiffOpKind.ADD.value:
            result.append({**copy.deepcopy(change.value), "id": change.id})
        elif change.op == DiffOpKind.REPLACE.value:
            value = {**change.value, "id": change.id}
            result = [copy.deepcopy(value) if item.get("id") == change.id else item for item in result]
        elif change.op == DiffOpKind.REMOVE.value:
            result = [item for item in result if item.get("id") != change.id]

    return result


def new_node_id(node_type: str) -> str:
    return f"{node_type}-{uuid.uuid4().hex}"


def new_edge_id() -> str:
    return f"edge-{uuid.uuid4().hex}"


def humanize_type(node_type: str) -> str:
    """loadBalancer -> Load Balancer"""
    if not node_type:
        return node_type
    return node_type[0].upper() + re.sub(r"([A-Z])", r" \1", node_type[1:])
