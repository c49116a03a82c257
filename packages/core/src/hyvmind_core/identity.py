from __future__ import annotations

import uuid

NAMESPACE_CURATION = uuid.UUID("5b0f7c2e-1d3a-4f6e-9a51-3c8e2d7b40a1")
NAMESPACE_SWARM = uuid.UUID("c3a9e1f4-7b2d-4e80-8f16-2a5d9c0b7e33")
NAMESPACE_LOCATION = uuid.UUID("8e4d2b17-6c9a-4a3f-b5e0-1f7a3d9c6b52")
NAMESPACE_LAW_TOKEN = uuid.UUID("2f6a8c31-9e4b-4d7a-a2c5-7b1e0d3f8a64")
NAMESPACE_INTERPRETATION_TOKEN = uuid.UUID("a7d1e5b9-3c2f-4b68-9e07-4d8c2a6f1b75")


def stable_node_id(namespace: uuid.UUID, text: str, creator: str) -> str:
    return str(uuid.uuid5(namespace, f"{text.strip()}:{creator.strip()}"))


def curation_id_for(*, name: str, jurisdiction: str, creator: str) -> str:
    return stable_node_id(NAMESPACE_CURATION, f"{name}:{jurisdiction}", creator)


def swarm_id_for(*, name: str, creator: str) -> str:
    # `name` is the globally unique (postfixed) swarm name.
    return stable_node_id(NAMESPACE_SWARM, name, creator)


def location_id_for(*, swarm_id: str, title: str, creator: str) -> str:
    # `title` is the versioned title, unique within the swarm.
    return stable_node_id(NAMESPACE_LOCATION, f"{swarm_id}:{title}", creator)


def law_token_id_for(*, location_id: str, label: str, creator: str) -> str:
    return stable_node_id(NAMESPACE_LAW_TOKEN, f"{location_id}:{label}", creator)


def interpretation_token_id_for(*, from_law_token_id: str, to_node_id: str, title: str, creator: str) -> str:
    return stable_node_id(NAMESPACE_INTERPRETATION_TOKEN, f"{from_law_token_id}:{to_node_id}:{title}", creator)
