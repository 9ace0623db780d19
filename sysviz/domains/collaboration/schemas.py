from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class NodeType(str, Enum):
    """Виды узлов диаграммы"""
    CLIENT = "client"
    LOAD_BALANCER = "loadBalancer"
    API_GATEWAY = "apiGateway"
    WEB_SERVER = "webServer"
    CACHE = "cache"
    MESSAGE_QUEUE = "messageQueue"
    DATABASE = "database"
    ML_MODEL = "mlModel"
    TRAINING_DATA = "trainingData"
    INFERENCE_SERVER = "inferenceServer"
    FRONTEND = "frontend"
    CDN = "cdn"
    ANALYTICS = "analytics"
    NOTE = "note"


class Position(BaseModel):
    x: float
    y: float


class NodeData(BaseModel):
    model_config = ConfigDict(extra="allow", use_enum_values=True)

    label: str
    type: NodeType
    latency: float = 10
    throughput: float = 100


class Node(BaseModel):
    """Узел графа, лишние поля клиента сохраняются"""
    model_config = ConfigDict(extra="allow")

    id: str
    type: str = "custom"
    position: Position
    data: NodeData


class Edge(BaseModel):
    """Ребро графа, концы не проверяются"""
    model_config = ConfigDict(extra="allow")

    id: str
    source: str
    target: str
    animated: bool = False
    style: Dict[str, Any] = Field(default_factory=dict)
    sourceHandle: Optional[str] = None
    targetHandle: Optional[str] = None


class GraphDocument(BaseModel):
    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)


class DiffOpKind(str, Enum):
    ADD = "add"
    REPLACE = "replace"
    REMOVE = "remove"


class DiffOp(BaseModel):
    """Структурное изменение списка узлов или рёбер по id"""
    model_config = ConfigDict(use_enum_values=True)

    op: DiffOpKind
    id: str
    value: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def check_value(self):
        if self.op != DiffOpKind.REMOVE.value and self.value is None:
            raise ValueError(f"'{self.op}' operation requires a value")
        return self

    @classmethod
    def add(cls, item: Dict[str, Any]) -> "DiffOp":
        return cls(op=DiffOpKind.ADD, id=item["id"], value=item)

    @classmethod
    def replace(cls, item: Dict[str, Any]) -> "DiffOp":
        return cls(op=DiffOpKind.REPLACE, id=item["id"], value=item)

    @classmethod
    def remove(cls, item_id: str) -> "DiffOp":
        return cls(op=DiffOpKind.REMOVE, id=item_id)

    def to_wire(self) -> Dict[str, Any]:
        wire = {"op": self.op, "id": self.id}
        if self.value is not None:
            wire["value"] = self.value
        return wire


class ChatMessage(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    user: str
    text: str
    timestamp: str


# Полезная нагрузка событий ретранслятора

class JoinPayload(BaseModel):
    workspaceId: str = Field(..., min_length=1)


class CursorMovePayload(BaseModel):
    workspaceId: str = Field(..., min_length=1)
    userId: Optional[str] = None
    userName: str = "Team Member"
    position: Position


class ChangePayload(BaseModel):
    workspaceId: str = Field(..., min_length=1)
    changes: List[DiffOp]


class AddNodePayload(BaseModel):
    workspaceId: str = Field(..., min_length=1)
    node: Node


class SendMessagePayload(BaseModel):
    workspaceId: str = Field(..., min_length=1)
    message: ChatMessage


class RemoteCursor(BaseModel):
    """Событие user-cursor-move, принятое клиентом"""
    userId: str
    userName: str = "Team Member"
    position: Position
