from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from hyvmind_core.db.models import Base
from hyvmind_core.graph import membership
from hyvmind_core.graph.store import create_curation, create_swarm

ALICE = "alice-aaaaa-aaaaa-cai"
BOB = "bob-bbbbb-bbbbb-cai"
CAROL = "carol-ccccc-ccccc-cai"
ANONYMOUS = "2vxsx-fae"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def session(session_factory) -> Iterator[Session]:
    with session_factory() as session:
        yield session


@pytest.fixture
def curation_id(session) -> str:
    return create_curation(session, ALICE, "Law", "IND")


@pytest.fixture
def swarm_id(session, curation_id) -> str:
    """A swarm created by ALICE with BOB as an approved member."""
    node_id = create_swarm(session, ALICE, "Defs", ["definitions"], curation_id)
    membership.request_to_join(session, BOB, node_id)
    membership.approve(session, ALICE, node_id, BOB)
    return node_id
