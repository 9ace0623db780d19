from sysviz.client.store import DiagramStore
from sysviz.client.presence import PresenceTracker, RemoteUser
from sysviz.client.reconciliation import Reconciler
from sysviz.client.persistence import PersistenceGateway, Autosaver
from sysviz.client.session import WorkspaceSession

__all__ = [
    "DiagramStore",
    "PresenceTracker",
    "RemoteUser",
    "Reconciler",
    "PersistenceGateway",
    "Autosaver",
    "WorkspaceSession"
]
